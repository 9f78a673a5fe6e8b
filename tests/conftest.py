# tests/conftest.py
# Ensure the project repo root is on sys.path so tests can import synctex_locator.
import sys
from pathlib import Path

import pytest

# repo root is one level up from this file: tests -> repo root
REPO_ROOT = Path(__file__).resolve().parents[1]

repo_root_str = str(REPO_ROOT)
if repo_root_str not in sys.path:
    sys.path.insert(0, repo_root_str)

from synctex_locator.model import UNIT  # noqa: E402


def sp(v: float) -> int:
    """Big points -> raw synctex units."""
    return int(round(v * UNIT))


# One input, one page, one hbox at line 12 holding one element with a width.
MINIMAL = f"""SyncTeX Version:1
Input:1:/doc/main.tex
Output:pdf
Magnification:1000
Unit:1
X Offset:0
Y Offset:0
Content:
!120
{{1
[1,10:{sp(72)},{sp(700)}:{sp(468)},{sp(650)},0
(1,12:{sp(100)},{sp(200)}:{sp(300)},{sp(10)},{sp(2)}
x1,12:{sp(100)},{sp(200)}:{sp(50)}
)
]
}}1
Postamble:
Count:4
Post scriptum:
"""

# Two inputs, two pages. Line 20 of main.tex appears on both pages.
TWO_PAGES = f"""SyncTeX Version:1
Input:1:/doc/main.tex
Input:2:/doc/sec.tex
X Offset:0
Y Offset:0
{{1
[1,1:0,0:{sp(400)},{sp(700)},0
(1,10:{sp(50)},{sp(100)}:{sp(300)},{sp(10)},0
x1,10:{sp(50)},{sp(100)}:{sp(100)}
x1,10:{sp(150)},{sp(100)}:{sp(200)}
)
(1,20:{sp(60)},{sp(200)}:{sp(300)},{sp(12)},0
x1,20:{sp(60)},{sp(200)}:{sp(40)}
)
(2,5:{sp(70)},{sp(300)}:{sp(300)},{sp(8)},0
x2,5:{sp(70)},{sp(300)}:{sp(30)}
)
]
}}1
{{2
[1,1:0,0:{sp(400)},{sp(700)},0
(1,30:{sp(80)},{sp(150)}:{sp(300)},{sp(14)},0
x1,30:{sp(80)},{sp(150)}:{sp(20)}
g1,20:{sp(90)},{sp(400)}
)
]
}}2
"""


@pytest.fixture
def minimal_text() -> str:
    return MINIMAL


@pytest.fixture
def two_pages_text() -> str:
    return TWO_PAGES
