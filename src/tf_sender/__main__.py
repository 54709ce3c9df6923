import sys

from tf_sender.cli import main

sys.exit(main())
