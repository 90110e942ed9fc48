from __future__ import annotations

from contractdesk.ui.cli import run

run()
