"""
Unit tests for RelinkPlanner.
Planning is pure: destinations are derived from paths only.
"""
from crossdedup.core.planner import RelinkPlanner
from crossdedup.core.classifier import PathClassifier
from crossdedup.core.models import ContentGroup, ResolvedGroup, FileRecord
from crossdedup.core.events import RunReport, EventKind

ROOTS = ["/mnt/v1", "/mnt/v2", "/mnt/v3"]


def resolved(canonical_path, *member_paths, inodes=None):
    classifier = PathClassifier(ROOTS)
    inodes = inodes or {}
    files = []
    for path in sorted((canonical_path,) + member_paths):
        record = classifier.classify(path)
        if path in inodes:
            record = record.with_inode(inodes[path])
        files.append(record)
    canonical = next(f for f in files if f.path == canonical_path)
    return ResolvedGroup(group=ContentGroup(digest=b"d", size=42, files=files), canonical=canonical)


class TestRelinkPlanner:
    def test_destination_mirrors_relative_path_on_canonical_volume(self):
        report = RunReport()
        actions = RelinkPlanner(PathClassifier(ROOTS), sink=report).plan(
            resolved("/mnt/v2/torrents/x.mkv", "/mnt/v1/movies/x.mkv")
        )

        assert len(actions) == 1
        action = actions[0]
        assert action.source_path == "/mnt/v1/movies/x.mkv"
        assert action.canonical_path == "/mnt/v2/torrents/x.mkv"
        assert action.destination_path == "/mnt/v2/movies/x.mkv"
        assert action.destination_directory == "/mnt/v2/movies"
        assert action.size == 42
        assert report.count(EventKind.ACTION_PLANNED) == 1

    def test_one_action_per_other_volume(self):
        actions = RelinkPlanner(PathClassifier(ROOTS)).plan(
            resolved("/mnt/v2/torrents/x.mkv", "/mnt/v1/a/x.mkv", "/mnt/v3/b/x.mkv")
        )
        assert [a.destination_path for a in actions] == ["/mnt/v2/a/x.mkv", "/mnt/v2/b/x.mkv"]

    def test_members_on_canonical_volume_are_left_alone(self):
        actions = RelinkPlanner(PathClassifier(ROOTS)).plan(
            resolved("/mnt/v2/torrents/x.mkv", "/mnt/v2/movies/x.mkv", "/mnt/v1/movies/x.mkv")
        )
        assert [a.source_path for a in actions] == ["/mnt/v1/movies/x.mkv"]

    def test_member_sharing_canonical_inode_is_not_planned(self):
        inodes = {"/mnt/v2/torrents/x.mkv": (1, 100), "/mnt/v1/movies/x.mkv": (1, 100)}
        actions = RelinkPlanner(PathClassifier(ROOTS)).plan(
            resolved("/mnt/v2/torrents/x.mkv", "/mnt/v1/movies/x.mkv", inodes=inodes)
        )
        assert actions == []

    def test_no_canonical_plans_nothing(self):
        group = resolved("/mnt/v2/torrents/x.mkv", "/mnt/v1/movies/x.mkv")
        group.canonical = None
        assert RelinkPlanner(PathClassifier(ROOTS)).plan(group) == []

    def test_unclassified_member_is_reported(self):
        group = resolved("/mnt/v2/torrents/x.mkv", "/mnt/v1/movies/x.mkv")
        group.group.files.append(FileRecord("/elsewhere/x.mkv", None))
        report = RunReport()

        actions = RelinkPlanner(PathClassifier(ROOTS), sink=report).plan(group)
        assert len(actions) == 1
        assert [e.path for e in report.events_of(EventKind.PLANNING_INCONSISTENCY)] == ["/elsewhere/x.mkv"]

    def test_plan_all_concatenates_in_group_order(self):
        groups = [
            resolved("/mnt/v2/torrents/b.mkv", "/mnt/v1/b.mkv"),
            resolved("/mnt/v3/torrents/a.mkv", "/mnt/v1/a.mkv"),
        ]
        actions = RelinkPlanner(PathClassifier(ROOTS)).plan_all(groups)
        assert [a.destination_path for a in actions] == ["/mnt/v2/b.mkv", "/mnt/v3/a.mkv"]
