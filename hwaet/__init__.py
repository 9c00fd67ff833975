"""
Hwæt: a glossing tool for Old English and other historical-language texts.

This package splits text into segments, has an annotation oracle gloss each
token (lemma, part of speech, morphology, etymology), and lays the tokens
back out as readable prose with study exports.
"""

__version__ = "0.1.0"
