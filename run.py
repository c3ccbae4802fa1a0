"""
Start gradientslide from a source checkout, no install needed.

    $ python run.py [--debug] [--log-file PATH]

Once installed (``pip install -e .``) the ``gradientslide`` command or
``python -m gradientslide`` do the same.
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from gradientslide.main import main  # noqa: E402

if __name__ == "__main__":
    main()
