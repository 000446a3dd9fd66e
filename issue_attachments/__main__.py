"""Allow ``python -m issue_attachments``."""

from issue_attachments.main import main

raise SystemExit(main())
