"""Console rendering of pairing codes."""

from __future__ import annotations

import sys
from typing import TextIO

import qrcode
from qrcode.constants import ERROR_CORRECT_L


def render_pairing_code(code: str, out: TextIO | None = None) -> None:
    """Print ``code`` as a scannable QR pattern followed by a scan prompt."""
    stream = out or sys.stdout
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_L, border=1)
    qr.add_data(code)
    qr.make(fit=True)
    print("Pairing code received, scan it with your phone:", file=stream)
    qr.print_ascii(out=stream, invert=True)
    print("Scan the QR code above to log in.", file=stream, flush=True)
