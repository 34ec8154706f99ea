"""installdisk: multi-boot Windows installation media.

Core design goals:
- One USB disk, many installers, BIOS and UEFI
- Boot menu entries composed through the BCD WMI provider, never bcdedit text
- Every store replica on the disk updated the same way
- Fail fast; the log and run state record what reached the disk
"""

__all__ = []
