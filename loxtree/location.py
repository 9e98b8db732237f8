"""
I want a simple, light-weight way to pass-around and manipulate points and spans within a collection of sources.
The concept is simple: Use integers, with spans of them associated to specific segments.
A segment is one file, or one line typed at the prompt.
"""
from bisect import bisect_right
from pathlib import Path
from typing import NamedTuple, Optional
from boozetools.support.failureprone import SourceText

class Span(NamedTuple):
	""" Aimed at whatever prints error messages """
	segment: int
	slice: slice

_slices: list[slice] = []
_bounds: list[int] = []
_paths: list[Optional[Path]] = []
_sources: list[SourceText] = []

def reset_location_index():
	for it in _slices, _bounds, _paths, _sources: it.clear()
	# Now prepare the "built-in" location, which is location zero:
	start_segment(None, "")
	insert_token(slice(0,0))

def start_segment(path:Optional[Path], text:str) -> int:
	assert isinstance(path, Path) or path is None
	_bounds.append(len(_slices))
	_paths.append(path)
	if path is None: _sources.append(SourceText(text))
	else: _sources.append(SourceText(text, filename=str(path)))
	return len(_paths) - 1

def insert_token(s:slice) -> int:
	index = len(_slices)
	_slices.append(s)
	return index

def lookup_token(index:int) -> Span:
	segment_index = bisect_right(_bounds, index)-1
	return Span(segment_index, _slices[index])

def lookup_span(first: int, last:int) -> Span:
	left = lookup_token(first)
	right = lookup_token(last)
	assert left.segment == right.segment
	return Span(left.segment, slice(left.slice.start, right.slice.stop))

def segment_path(segment:int) -> Optional[Path]:
	return _paths[segment]

def segment_source(segment:int) -> SourceText:
	return _sources[segment]

reset_location_index()
