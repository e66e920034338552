"""
Unit tests for the two narrowing phases.
NameStage groups by basename across volumes; ContentStage confirms content by digest.
"""
from crossdedup.core.stages import NameStage, ContentStage
from crossdedup.core.grouper import FileGrouperImpl
from crossdedup.core.classifier import PathClassifier
from crossdedup.core.models import FileRecord, NameGroup
from crossdedup.core.events import RunReport, EventKind


class TestNameStage:
    def test_returns_groups_sorted_by_name(self):
        files = [
            FileRecord("/v1/b.mkv", "/v1"), FileRecord("/v2/b.mkv", "/v2"),
            FileRecord("/v1/a.mkv", "/v1"), FileRecord("/v3/a.mkv", "/v3"),
            FileRecord("/v1/c.mkv", "/v1"),
        ]
        groups = NameStage(FileGrouperImpl()).process(files)
        assert [g.basename for g in groups] == ["a.mkv", "b.mkv"]
        assert all(g.spans_volumes() for g in groups)

    def test_unclassified_files_are_reported(self):
        report = RunReport()
        files = [FileRecord("/v1/x", "/v1"), FileRecord("/other/x", None)]
        groups = NameStage(FileGrouperImpl(), sink=report).process(files)

        assert groups == []
        assert [e.path for e in report.events_of(EventKind.PLANNING_INCONSISTENCY)] == ["/other/x"]

    def test_stopped_flag_returns_empty(self):
        files = [FileRecord("/v1/x", "/v1"), FileRecord("/v2/x", "/v2")]
        assert NameStage(FileGrouperImpl()).process(files, stopped_flag=lambda: True) == []

    def test_progress_callback_invoked(self):
        calls = []
        files = [FileRecord("/v1/x", "/v1"), FileRecord("/v2/x", "/v2")]
        NameStage(FileGrouperImpl()).process(files, progress_callback=lambda *a: calls.append(a))
        assert calls == [("Name grouping", 2, 2)]


class TestContentStage:
    def _name_groups(self, volumes, paths):
        classifier = PathClassifier([str(v) for v in volumes])
        records = [classifier.classify(str(p)) for p in paths]
        return NameStage(FileGrouperImpl()).process(records)

    def test_identical_content_on_two_volumes_forms_group(self, volumes, write_file):
        a = write_file(volumes[0] / "movies" / "x.mkv", b"same")
        b = write_file(volumes[1] / "torrents" / "x.mkv", b"same")
        report = RunReport()

        groups = ContentStage(FileGrouperImpl(), sink=report).process(self._name_groups(volumes, [a, b]))

        assert len(groups) == 1
        assert groups[0].size == 4
        assert [f.path for f in groups[0].files] == [str(a), str(b)]
        assert report.count(EventKind.GROUP_DISCOVERED) == 1

    def test_same_name_different_content_is_not_a_group(self, volumes, write_file):
        a = write_file(volumes[0] / "x.mkv", b"AAAA")
        b = write_file(volumes[1] / "x.mkv", b"BBBB")
        assert ContentStage(FileGrouperImpl()).process(self._name_groups(volumes, [a, b])) == []

    def test_group_collapsing_to_one_volume_is_dropped(self, volumes, write_file):
        """Spread is recomputed after every split, not inherited from Phase 1."""
        a1 = write_file(volumes[0] / "a" / "x.mkv", b"same")
        a2 = write_file(volumes[0] / "b" / "x.mkv", b"same")
        b = write_file(volumes[1] / "x.mkv", b"diff")
        name_groups = self._name_groups(volumes, [a1, a2, b])
        assert len(name_groups) == 1

        assert ContentStage(FileGrouperImpl()).process(name_groups) == []

    def test_groups_ordered_by_size_descending(self, volumes, write_file):
        paths = [
            write_file(volumes[0] / "small.bin", b"s"),
            write_file(volumes[1] / "small.bin", b"s"),
            write_file(volumes[0] / "big.bin", b"b" * 100),
            write_file(volumes[1] / "big.bin", b"b" * 100),
        ]
        groups = ContentStage(FileGrouperImpl()).process(self._name_groups(volumes, paths))
        assert [g.size for g in groups] == [100, 1]

    def test_progress_reports_each_step(self, volumes, write_file):
        a = write_file(volumes[0] / "x.mkv", b"same")
        b = write_file(volumes[1] / "x.mkv", b"same")
        calls = []
        ContentStage(FileGrouperImpl()).process(
            self._name_groups(volumes, [a, b]), progress_callback=lambda *args: calls.append(args)
        )
        assert [c[0] for c in calls] == ["Size grouping", "Front-chunk Hash", "Full Hash"]
        assert calls[-1] == ("Full Hash", 2, 2)

    def test_candidates_flattens_groups(self):
        groups = [
            NameGroup("x", [FileRecord("/v1/x", "/v1"), FileRecord("/v2/x", "/v2")]),
            NameGroup("y", [FileRecord("/v1/y", "/v1"), FileRecord("/v2/y", "/v2")]),
        ]
        assert len(ContentStage(FileGrouperImpl()).candidates(groups)) == 4
