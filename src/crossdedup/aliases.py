from crossdedup.core.classifier import VOLUME_TOKEN
from crossdedup.core.models import DEFAULT_PRIORITY_NAMES

LOG_LEVEL_CHOICES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

VOLUME_HELP_TEXT = (
    "Volume root to scan (repeatable, glob patterns allowed).\n"
    "Each volume is a separate filesystem; hardlinks never cross volumes.\n"
    "Example    : %(prog)s -V '/mnt/disk*'\n"
)

EXCLUDE_HELP_TEXT = (
    "Directory to skip on every volume (repeatable):\n"
    f"  {VOLUME_TOKEN}/appdata  : 'appdata' at the root of each volume\n"
    "  appdata           : same, relative form\n"
    "  /mnt/disk1/tmp    : only on the volume that contains it\n"
    "Exclusions that do not exist on a volume are ignored for that volume."
)

PRIORITY_HELP_TEXT = (
    "Directory names marking authoritative copies (case-insensitive).\n"
    f"Default: {' '.join(DEFAULT_PRIORITY_NAMES)}"
)

EPILOG_TEXT = """
Examples:
  Dry run (default) - show what would be relinked across five disks
  %(prog)s -V /mnt/disk3 -V /mnt/disk4 -V /mnt/disk5 -V /mnt/disk6 -V /mnt/disk7

  Same, with a glob and a few exclusions
  %(prog)s -V '/mnt/disk*' -e '{volume}/appdata' -e '{volume}/system'

  Replace duplicates with hardlinks (asks for confirmation)
  %(prog)s -V '/mnt/disk*' --real-run

  Same, unattended, logging to a directory that keeps the last 5 logs
  %(prog)s -V '/mnt/disk*' --real-run --force --log-dir /var/log/crossdedup

  Use a prepared list of paths instead of walking the disks
  %(prog)s -V '/mnt/disk*' -p /tmp/paths.txt

Only files sharing a name on two or more volumes are hashed; renamed copies
are not detected. Copies under a 'torrent' or 'torrents' directory are never
modified.
"""
