import sys

from dodo_upload.presentation.cli import main

sys.exit(main())
