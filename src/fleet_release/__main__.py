"""Allow ``python -m fleet_release``."""

from fleet_release.cli.main import main

raise SystemExit(main())
