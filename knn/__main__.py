import sys

from knn.main import main


sys.exit(main())
