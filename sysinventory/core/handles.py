"""
Query Handles - WMI, Registry and PowerShell access

Every collector receives the handle it needs as an argument. Handles are
opened once by open_handles() before the first section runs; failure to
reach the core WMI namespace means no section can run at all.

Requires:
- Windows platform
- wmi (pywin32 COM) for CIM queries
"""
import subprocess
import sys
from typing import Any, List, NamedTuple, Optional

from sysinventory.core.config import Config
from sysinventory.core.exceptions import (
    CollectorError,
    FatalEnvironment,
    InterfaceUnavailable,
    PermissionDenied,
)

try:
    import wmi
except ImportError:
    wmi = None

try:
    import winreg
except ImportError:
    winreg = None

# WBEM / HRESULT codes surfaced through wmi.x_wmi
ACCESS_DENIED_CODES = {0x80041003, 0x80070005}
UNAVAILABLE_CODES = {0x8004100E, 0x80041010, 0x80041013}


def _wmi_error_code(exc: Exception) -> Optional[int]:
    """Extract the WBEM status (or HRESULT) from a wmi.x_wmi error."""
    com_error = getattr(exc, "com_error", None)
    if com_error is None:
        return None
    excepinfo = getattr(com_error, "excepinfo", None)
    if excepinfo and len(excepinfo) > 5 and excepinfo[5]:
        return excepinfo[5] & 0xFFFFFFFF
    hresult = getattr(com_error, "hresult", None)
    return hresult & 0xFFFFFFFF if hresult is not None else None


class WmiSource:
    """One connection to a WMI namespace."""

    def __init__(self, namespace: str = "root/cimv2", connection: Any = None):
        self.namespace = namespace
        if connection is not None:
            self._conn = connection
        else:
            if wmi is None:
                raise InterfaceUnavailable(namespace, "wmi package not installed")
            self._conn = wmi.WMI(namespace=namespace)

    def query(self, class_name: str, **filters) -> List[Any]:
        """Return all instances of a WMI class, optionally filtered by property values.

        Raises:
            PermissionDenied: WMI refused access to the class.
            InterfaceUnavailable: The class does not exist in this namespace.
        """
        try:
            return list(getattr(self._conn, class_name)(**filters))
        except Exception as exc:
            if wmi is None or not isinstance(exc, wmi.x_wmi):
                raise
            code = _wmi_error_code(exc)
            if code in ACCESS_DENIED_CODES:
                raise PermissionDenied(class_name, "access denied by WMI") from exc
            if code in UNAVAILABLE_CODES:
                raise InterfaceUnavailable(class_name, f"{class_name} not available in {self.namespace}") from exc
            raise CollectorError(class_name, f"WMI query failed: {exc}") from exc


class RegistryReader:
    """Read-only access to single registry values."""

    def read_value(self, hive: str, path: str, name: str) -> Any:
        """Read one value; the key handle is closed before returning.

        Returns:
            The stored value, or None when the key or the value does not exist.
        """
        if winreg is None:
            raise InterfaceUnavailable("registry", "winreg not available on this platform")
        root = winreg.HKEY_LOCAL_MACHINE if hive == "HKLM" else winreg.HKEY_CURRENT_USER
        try:
            with winreg.OpenKey(root, path, 0, winreg.KEY_READ) as key:
                value, _ = winreg.QueryValueEx(key, name)
                return value
        except FileNotFoundError:
            return None
        except PermissionError as exc:
            raise PermissionDenied("registry", f"access denied reading {hive}\\{path}") from exc


class PowerShell:
    """Runs single PowerShell expressions and returns their stdout."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def run(self, command: str) -> str:
        try:
            result = subprocess.run(
                ["powershell", "-NoProfile", "-NonInteractive", "-Command", command],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise InterfaceUnavailable("powershell", "powershell executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise CollectorError("powershell", f"'{command}' timed out after {self.timeout:g}s") from exc

        if result.returncode != 0:
            detail = (result.stderr or "").strip().splitlines()
            raise CollectorError("powershell", f"'{command}' exited {result.returncode}: {detail[0] if detail else 'no output'}")
        return result.stdout.strip()


class QueryHandles(NamedTuple):
    cimv2: WmiSource
    security_center: Optional[WmiSource]
    registry: RegistryReader
    powershell: PowerShell


def open_handles(config: Config) -> QueryHandles:
    """Open every handle the report needs.

    Raises:
        FatalEnvironment: Not running on Windows, or the root/cimv2 namespace is unreachable.
    """
    if sys.platform != "win32":
        raise FatalEnvironment(f"Windows is required (running on {sys.platform})")
    if wmi is None:
        raise FatalEnvironment("The 'wmi' package is not installed")

    try:
        cimv2 = WmiSource("root/cimv2")
    except Exception as exc:
        raise FatalEnvironment(f"Cannot connect to WMI root/cimv2: {exc}") from exc

    # Server SKUs ship without SecurityCenter2
    try:
        security_center = WmiSource("root/SecurityCenter2")
    except Exception:
        security_center = None

    return QueryHandles(
        cimv2=cimv2,
        security_center=security_center,
        registry=RegistryReader(),
        powershell=PowerShell(timeout=config.command_timeout),
    )
