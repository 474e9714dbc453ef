from typing import Dict, List, Optional, Tuple

from solar_monitor.schemas.dashboard import ParameterLocation, TabInfo

TABS: List[TabInfo] = [
    TabInfo(id="admin", label="Admin"),
    TabInfo(id="live-status", label="Live Status"),
    TabInfo(id="reports", label="Reports"),
    TabInfo(id="alerts", label="Alerts"),
    TabInfo(id="ai-intelligence", label="AI Intelligence"),
]

TAB_IDS = [tab.id for tab in TABS]

# search term -> (tab, element id); lookup order matters for partial matches
PARAMETER_MAP: Dict[str, Tuple[str, str]] = {
    # live status parameters
    "Device ID": ("live-status", "Device ID"),
    "Device State": ("live-status", "Device State"),
    "FW Version": ("live-status", "FW Version"),
    "Temperature": ("live-status", "Temperature"),
    "Humidity": ("live-status", "Humidity"),
    "Voltage Battery": ("live-status", "Voltage Battery"),
    "Voltage Solar Panel": ("live-status", "Voltage Solar Panel"),
    "Running Current": ("live-status", "Running Current"),
    "Avg Current": ("live-status", "Avg Current"),
    "Motor Speed": ("live-status", "Motor Speed"),
    "Panel Location": ("live-status", "Panel Location"),
    "Battery %": ("live-status", "Battery %"),
    "Connectivity Status": ("live-status", "Connectivity Status"),
    "Total Runtime": ("live-status", "Total Runtime"),
    "DBG Accel Output": ("live-status", "DBG Accel Output"),
    "DBG Gyro Output": ("live-status", "DBG Gyro Output"),
    "DBG Motor Status 0": ("live-status", "DBG Motor Status 0"),
    "DBG Motor Status 1": ("live-status", "DBG Motor Status 1"),
    "General Status": ("live-status", "General Status"),
    "Time Stamp": ("live-status", "Time Stamp"),

    # reports parameters
    "error code": ("reports", "Error Code"),
    "total runtime reports": ("reports", "Total Runtime"),
    "dbg accel output": ("reports", "DBG Accel Output"),
    "dbg gyro output": ("reports", "DBG Gyro Output"),
    "dbg motor status 0": ("reports", "DBG Motor Status 0"),
    "dbg motor status 1": ("reports", "DBG Motor Status 1"),
    "general status": ("reports", "General Status"),
    "time stamp reports": ("reports", "Time Stamp"),
}


def get_tab(tab_id: str) -> Optional[TabInfo]:
    for tab in TABS:
        if tab.id == tab_id:
            return tab
    return None


def find_parameter(query: Optional[str]) -> Optional[ParameterLocation]:
    """
    Resolve a search query to the tab and element that shows it.

    Matching is case-insensitive: an exact key match wins, otherwise the
    first key (in map order) that contains the query. Blank queries resolve
    to nothing.
    """
    if not query or not query.strip():
        return None
    search_key = query.strip().lower()

    found = None
    for key, location in PARAMETER_MAP.items():
        if key.lower() == search_key:
            found = (key, location)
            break
    if found is None:
        for key, location in PARAMETER_MAP.items():
            if search_key in key.lower():
                found = (key, location)
                break
    if found is None:
        return None

    key, (tab, element_id) = found
    return ParameterLocation(key=key, tab=tab, element_id=element_id)
