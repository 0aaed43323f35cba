import sys

from acmelite import main

if __name__ == '__main__':
    sys.exit(main.main())
