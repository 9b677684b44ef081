"""
Stand-ins for the psutil result tuples the samplers read.
"""

from collections import namedtuple


VirtualMemory = namedtuple("VirtualMemory", "total available percent used free")
SwapMemory = namedtuple("SwapMemory", "total used free percent sin sout")
Partition = namedtuple("Partition", "device mountpoint fstype opts")
DiskUsage = namedtuple("DiskUsage", "total used free percent")
NetIO = namedtuple(
    "NetIO", "bytes_sent bytes_recv packets_sent packets_recv errin errout dropin dropout"
)
