"""
Module entry-point: python -m exif_rename
"""
from .main import main

if __name__ == "__main__":
    main()
