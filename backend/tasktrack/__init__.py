"""TaskTrack — task mutation, time journal and accountability service.

Package root holds only the version; import submodules explicitly.
"""

__version__ = "1.0.0"
