"""
# ftab: firmware table files for humans.

A ftab file is a container used by the firmware of some accessories: a fixed
header, a table of tagged segments, the data of the segments and, optionally,
a ticket (a signature blob) at the end.

Two basic operations are defined on it:

 1. unpack: decode() the binary data into a Layout, then to_manifest() saves
    every segment into its own file and returns the Manifest describing them.

 2. pack: from_manifest() loads the files referenced by a Manifest into a
    Layout and encode() turns it back into binary data.

Fields whose meaning is unknown are carried along as they are, while offsets
and lengths are always recomputed when packing, so that a segment file can be
edited freely.

The binary format is described with the declarative Chunk/Field classes of
ftab.core and ftab.fields, see ftab.format.
"""
