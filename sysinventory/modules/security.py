# sysinventory/modules/security.py
from typing import List, Optional, Tuple

from sysinventory.core.exceptions import InterfaceUnavailable, PermissionDenied
from sysinventory.core.handles import PowerShell, RegistryReader, WmiSource
from sysinventory.core.schemas import FirewallProfile, SecurityPosture, Severity

UAC_PATH = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Policies\System"
FIREWALL_PATH = r"SYSTEM\CurrentControlSet\Services\SharedAccess\Parameters\FirewallPolicy"
FIREWALL_PROFILES = ("Domain", "Standard", "Public")

NO_ANTIVIRUS = "none detected"
ANTIVIRUS_UNAVAILABLE = "unavailable (SecurityCenter2 not present)"
ANTIVIRUS_UNREADABLE = "unavailable (SecurityCenter2 query failed)"

# Unlisted policies (Undefined, custom values) fall through to CRITICAL
EXECUTION_POLICY_TIERS = {
    "allsigned": Severity.OK,
    "remotesigned": Severity.OK,
    "restricted": Severity.CAUTION,
    "unrestricted": Severity.CRITICAL,
    "bypass": Severity.CRITICAL,
}


def check_antivirus(security_center: Optional[WmiSource]) -> Tuple[str, Severity]:
    """Registered antivirus products, joined; an empty registry is a valid answer."""
    if security_center is None:
        return ANTIVIRUS_UNAVAILABLE, Severity.CAUTION
    try:
        products = security_center.query("AntiVirusProduct")
    except (InterfaceUnavailable, PermissionDenied):
        return ANTIVIRUS_UNREADABLE, Severity.CAUTION
    names = sorted({(p.displayName or "").strip() for p in products} - {""})
    if not names:
        return NO_ANTIVIRUS, Severity.CRITICAL
    return ", ".join(names), Severity.OK


def check_uac(registry: RegistryReader) -> Tuple[bool, Severity]:
    """EnableLUA must be explicitly 1; a missing value means UAC was never turned on."""
    value = registry.read_value("HKLM", UAC_PATH, "EnableLUA")
    if value == 1:
        return True, Severity.OK
    return False, Severity.CRITICAL


def grade_execution_policy(policy: str) -> Severity:
    return EXECUTION_POLICY_TIERS.get(policy.strip().lower(), Severity.CRITICAL)


def check_execution_policy(powershell: PowerShell) -> Tuple[str, Severity]:
    policy = powershell.run("Get-ExecutionPolicy").strip() or "Undefined"
    return policy, grade_execution_policy(policy)


def check_firewall(registry: RegistryReader) -> List[FirewallProfile]:
    profiles = []
    for name in FIREWALL_PROFILES:
        value = registry.read_value("HKLM", f"{FIREWALL_PATH}\\{name}Profile", "EnableFirewall")
        enabled = value == 1
        profiles.append(FirewallProfile(
            name=name,
            enabled=enabled,
            severity=Severity.OK if enabled else Severity.CRITICAL,
        ))
    return profiles


def count_patches(cim: WmiSource) -> int:
    return len(cim.query("Win32_QuickFixEngineering"))


def collect_security(cim: WmiSource, security_center: Optional[WmiSource],
                     registry: RegistryReader, powershell: PowerShell) -> SecurityPosture:
    antivirus, antivirus_severity = check_antivirus(security_center)
    uac_enabled, uac_severity = check_uac(registry)
    policy, policy_severity = check_execution_policy(powershell)
    return SecurityPosture(
        antivirus=antivirus,
        antivirus_severity=antivirus_severity,
        uac_enabled=uac_enabled,
        uac_severity=uac_severity,
        execution_policy=policy,
        execution_policy_severity=policy_severity,
        patch_count=count_patches(cim),
        firewall=check_firewall(registry),
    )
