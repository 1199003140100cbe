import sys

from symfilter.cli import main

# python -m symfilter --export libfoo.so
if __name__ == "__main__":
    sys.exit(main())
