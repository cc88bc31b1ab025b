# src/fxsync/__main__.py
from fxsync.app import main

if __name__ == "__main__":
    main()
