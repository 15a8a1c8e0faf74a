"""Department whitelist loaded from a line-delimited text file.

File format, one site segment per line:

    # Approved departments
    /Finance/
    HumanResources

Blank lines and '#' comments are ignored; bare names are wrapped in slashes.
"""

from pathlib import Path

from common.logger import get_logger

logger = get_logger(__name__)


class DepartmentWhitelist:
    """Loader for the approved-department list."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> set[str]:
        """Read the whitelist file.

        Returns:
            Set of path-delimited segments such as '/Finance/'

        Raises:
            FileNotFoundError: If the whitelist file does not exist
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Department whitelist not found: {self.path}")

        entries: set[str] = set()
        for line in self.path.read_text(encoding="utf-8").splitlines():
            entry = line.strip()
            if not entry or entry.startswith("#"):
                continue
            if not entry.startswith("/"):
                entry = f"/{entry}"
            if not entry.endswith("/"):
                entry = f"{entry}/"
            entries.add(entry)

        logger.info(f"Loaded {len(entries)} whitelisted department(s) from {self.path}")
        return entries
