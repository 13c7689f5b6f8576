"""Allow running Squashy with ``python -m squashy``."""

from squashy.cli import main


raise SystemExit(main())
