"""Utility helpers for raster analysis and UTF-16 text arithmetic.

* :mod:`bedrock_glyphs.utils.image`: sheet decoding, per-cell transparency,
  data URI embedding and crop geometry (Pillow + NumPy).
* :mod:`bedrock_glyphs.utils.text`: iteration by code point with UTF-16
  code unit offsets, as used by host editors.
"""
