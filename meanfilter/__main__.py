import sys

from .cli.filter_image import main

sys.exit(main())
