import sys

from rc4kit.cli import main

sys.exit(main())
