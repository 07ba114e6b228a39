"""Rendering subpackage.

Turns document text into decoration instructions for a host editor:

* :mod:`bedrock_glyphs.renderer.descriptor` memoizes one visual descriptor
  per glyph cell and render mode.
* :mod:`bedrock_glyphs.renderer.model` computes the ranges to decorate and
  plans the clear/apply step against what was applied before.
"""
