# 애플리케이션 실행 진입점

import sys

from yaqdah.server import main

if __name__ == "__main__":
    sys.exit(main())
