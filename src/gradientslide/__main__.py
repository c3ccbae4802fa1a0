"""Allows ``python -m gradientslide``."""
from gradientslide.main import main

if __name__ == "__main__":
    main()
