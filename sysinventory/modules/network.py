"""
Network Collector - Interface Addresses & Active TCP Connections

Connections are gathered in two phases: the socket table is enumerated
first, then owning process names are resolved. A process that exits
between the two phases is reported as "unknown"; the connection stays listed.
"""
import ipaddress
import socket
from typing import Dict, List, Optional

import psutil

from sysinventory.core.schemas import NetworkConnection, NetworkInterfaceAddress

UNKNOWN_PROCESS = "unknown"
REPORTED_STATES = (psutil.CONN_LISTEN, psutil.CONN_ESTABLISHED)


def _prefix_length(netmask: Optional[str]) -> Optional[int]:
    if not netmask:
        return None
    try:
        return ipaddress.IPv4Network(f"0.0.0.0/{netmask}").prefixlen
    except ValueError:
        return None


def collect_interfaces() -> List[NetworkInterfaceAddress]:
    """IPv4 address of every non-loopback interface."""
    addresses = []
    for name, entries in sorted(psutil.net_if_addrs().items()):
        for entry in entries:
            if entry.family != socket.AF_INET:
                continue
            if ipaddress.IPv4Address(entry.address).is_loopback:
                continue
            addresses.append(NetworkInterfaceAddress(
                interface=name,
                address=entry.address,
                prefix_length=_prefix_length(entry.netmask),
            ))
    return addresses


def _endpoint(addr) -> str:
    if not addr:
        return "-"
    ip, port = addr.ip, addr.port
    return f"[{ip}]:{port}" if ":" in ip else f"{ip}:{port}"


def resolve_process_name(pid: Optional[int], cache: Dict[int, str]) -> str:
    """Name of a process, or 'unknown' when it has already exited or cannot be opened."""
    if pid is None:
        return UNKNOWN_PROCESS
    if pid not in cache:
        try:
            cache[pid] = psutil.Process(pid).name() or UNKNOWN_PROCESS
        except (psutil.NoSuchProcess, psutil.ZombieProcess, psutil.AccessDenied):
            cache[pid] = UNKNOWN_PROCESS
    return cache[pid]


def collect_connections() -> List[NetworkConnection]:
    # Phase 1: snapshot the TCP table
    raw = [conn for conn in psutil.net_connections(kind="tcp") if conn.status in REPORTED_STATES]

    # Phase 2: resolve owners
    names: Dict[int, str] = {}
    connections = [
        NetworkConnection(
            pid=conn.pid,
            process_name=resolve_process_name(conn.pid, names),
            local=_endpoint(conn.laddr),
            remote=_endpoint(conn.raddr),
            state=conn.status,
        )
        for conn in raw
    ]
    connections.sort(key=lambda c: (c.state != psutil.CONN_LISTEN, c.process_name.lower(), c.local))
    return connections
