"""
Unit tests for CanonicalSelector.
The canonical copy is the first member, in path order, under a priority directory.
"""
import pytest
from crossdedup.core.selector import CanonicalSelector
from crossdedup.core.models import ContentGroup, FileRecord
from crossdedup.core.events import RunReport, EventKind


def group(*paths) -> ContentGroup:
    return ContentGroup(
        digest=b"d", size=1,
        files=[FileRecord(p, "/" + p.strip("/").split("/")[0]) for p in paths]
    )


class TestIsPriority:
    @pytest.mark.parametrize("path, expected", [
        ("/v2/torrents/x.mkv", True),
        ("/v2/data/Torrent/sub/x.mkv", True),
        ("/v2/TORRENTS/x.mkv", True),
        ("/v2/mytorrents/x.mkv", False),
        ("/v2/torrents.old/x.mkv", False),
        ("/v2/movies/x.mkv", False),
    ])
    def test_matches_whole_segments_case_insensitively(self, path, expected):
        assert CanonicalSelector().is_priority(path) is expected

    def test_custom_priority_names(self):
        selector = CanonicalSelector(["Seeding"])
        assert selector.is_priority("/v1/seeding/x")
        assert not selector.is_priority("/v1/torrents/x")


class TestSelect:
    def test_priority_member_is_canonical(self):
        report = RunReport()
        resolved = CanonicalSelector(sink=report).select(group("/v1/movies/x.mkv", "/v2/torrents/x.mkv"))

        assert resolved.canonical.path == "/v2/torrents/x.mkv"
        assert report.count(EventKind.CANONICAL_SELECTED) == 1

    def test_first_in_path_order_wins_among_several(self):
        resolved = CanonicalSelector().select(
            group("/v3/torrents/x.mkv", "/v1/movies/x.mkv", "/v2/torrent/x.mkv")
        )
        assert resolved.canonical.path == "/v2/torrent/x.mkv"

    def test_no_priority_member_yields_no_canonical(self):
        report = RunReport()
        g = group("/v1/movies/x.mkv", "/v2/films/x.mkv")
        resolved = CanonicalSelector(sink=report).select(g)

        assert resolved.canonical is None
        assert not resolved.has_canonical
        events = report.events_of(EventKind.NO_CANONICAL)
        assert len(events) == 1
        assert events[0].group is g

    def test_selection_does_not_depend_on_member_order(self):
        paths = ["/v2/torrents/x.mkv", "/v1/torrents/x.mkv", "/v3/x.mkv"]
        forward = CanonicalSelector().select(group(*paths))
        backward = CanonicalSelector().select(group(*reversed(paths)))
        assert forward.canonical == backward.canonical
