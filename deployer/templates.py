import time
from typing import Sequence

MIT_LICENSE = """MIT License

Copyright (c) %YEAR%%AUTHOR%

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

def mit_license(holder: str = "", year: str = "") -> str:
    year = year or time.strftime("%Y")
    return MIT_LICENSE.replace("%YEAR%", year).replace("%AUTHOR%", f" {holder}" if holder else "")

def readme(brief: str, checks: Sequence[str], attachment_names: Sequence[str] = ()) -> str:
    features = "\n".join(f"{i}. {c}" for i, c in enumerate(checks, 1)) or "_No explicit checks._"
    attached = ""
    if attachment_names:
        attached = "\n## Data files\n" + "\n".join(f"- `{n}`" for n in attachment_names) + "\n"
    return f"""# Project Application

## Summary
{brief}

## Setup
1. Clone this repository
2. Open index.html in a web browser

## Usage
Open the deployed GitHub Pages URL or run locally by opening index.html.

## Features
{features}
{attached}
## Code Explanation
A single-page application in one index.html file with inline CSS and JavaScript.
Third-party libraries, if any, are loaded from CDNs.

## License
MIT License - see LICENSE file for details
"""
