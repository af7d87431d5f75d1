from __future__ import annotations

from edisontel.cli.main import main

main()
