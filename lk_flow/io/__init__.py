"""Frame codec and flow file I/O."""
