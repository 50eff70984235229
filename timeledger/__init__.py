"""TimeLedger: a personal punch-in/punch-out ledger.

Each project accumulates one row per calendar day holding that day's
``HH:MM-HH:MM`` intervals.  When a new month starts, a project's rows are
frozen into a monthly backup.  Projects are grouped by coloured labels,
and the whole ledger can be exported to (and restored from) a JSON
bundle or written out as a CSV report.
"""

__version__ = "0.2.0"
__description__ = "Personal time ledger with monthly backups, JSON bundles and CSV reports"

from timeledger.core.ledger_store import LedgerStore
from timeledger.core.tracker import Tracker
from timeledger.cli.app import app as cli

__all__ = ["LedgerStore", "Tracker", "cli", "__version__"]
