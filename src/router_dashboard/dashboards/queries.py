"""PromQL composition for the Router Monitor dashboard.

Template variables (``$instance``, ``$localips``, ``$__range`` ...) are left
unresolved on purpose; Grafana substitutes them when the dashboard is viewed.
"""

from dataclasses import dataclass

INSTANCE_FILTER = 'instance=~"$instance"'

RANGE = "$__range"
INTERVAL = "$__interval"
RATE_INTERVAL = "$__rate_interval"

INCREASE = "increase"
RATE = "rate"

BYTES_TOTAL = "router_monitor_bytes_total"
PACKETS_TOTAL = "router_monitor_packets_total"
CONNECTION_IS_UP = "router_monitor_internet_connection_is_up"
CONNECTION_DURATION = "router_monitor_internet_connection_duration_seconds"
ARP_DEVICES = "router_monitor_arp_devices"
HOSTNAMES = "router_monitor_hostnames"
DNSMASQ_LEASES = "router_monitor_dnsmasq_leases"
DNSMASQ_LEASE_INFO = "router_monitor_dnsmasq_lease_info"

DEVICE_JOIN = (
    f"+ on(ip_addr) group_left(hw_addr, device, flags) {ARP_DEVICES}\n"
    f"+ on(ip_addr) group_left(hostname) {HOSTNAMES}\n"
)


@dataclass(frozen=True)
class TrafficDirection:
    """A traffic direction between the local network and the internet.

    ``labels`` selects the direction; ``ip_label`` names the local endpoint
    and ``remote_label`` the internet side.
    """

    name: str
    labels: str
    ip_label: str
    remote_label: str


DOWNLOAD = TrafficDirection(
    name="Download",
    labels='dst=~"$localips",src=~"internet"',
    ip_label="dst",
    remote_label="src",
)
UPLOAD = TrafficDirection(
    name="Upload",
    labels='src=~"$localips",dst=~"internet"',
    ip_label="src",
    remote_label="dst",
)


def with_instance(metric: str, labels: str = "") -> str:
    """Select ``metric`` restricted to the dashboard's instance variable."""
    if labels:
        return f"{metric}{{{labels},{INSTANCE_FILTER}}}"
    return f"{metric}{{{INSTANCE_FILTER}}}"


def build_traffic_query(
    labels: str,
    ip_label: str,
    window: str = RANGE,
    func: str = INCREASE,
    include_device_join: bool = True,
) -> str:
    """Bytes transferred per IP, relabelled to ``ip_addr``.

    Args:
        labels: Label selector fragment choosing the traffic direction
        ip_label: Label to aggregate by and copy into ``ip_addr``
        window: Range selector, e.g. ``$__range`` or ``$__rate_interval``
        func: ``increase`` or ``rate``
        include_device_join: Join ARP device and hostname labels onto the result

    Returns:
        PromQL expression
    """
    query = f"""
label_replace(
  sum by({ip_label}) (
    {func}(
      {with_instance(BYTES_TOTAL, labels)}[{window}]
    ) > 0
  ),
  "ip_addr", "$1", "{ip_label}", "(.*)"
)"""
    if include_device_join:
        query += "\n" + DEVICE_JOIN
    return query


def bandwidth_usage_query(direction: TrafficDirection) -> str:
    return (
        f"sum by({direction.remote_label}) "
        f"({INCREASE}({with_instance(BYTES_TOTAL, direction.labels)}[{RANGE}]))"
    )


def connection_up_query() -> str:
    return with_instance(CONNECTION_IS_UP)


def downtime_query() -> str:
    return f"(1 - avg_over_time({with_instance(CONNECTION_IS_UP)}[{RANGE}])) * $__range_s"


def average_latency_query(separator: str = " / ") -> str:
    return (
        f"rate({with_instance(CONNECTION_DURATION + '_sum')}[{RATE_INTERVAL}]){separator}"
        f"rate({with_instance(CONNECTION_DURATION + '_count')}[{RATE_INTERVAL}])"
    )


def latency_quantile_query(quantile: str) -> str:
    return (
        f"histogram_quantile({quantile}, sum by (le) "
        f"(rate({with_instance(CONNECTION_DURATION + '_bucket')}[{RATE_INTERVAL}])))"
    )


def connection_down_query() -> str:
    return f"1 - {with_instance(CONNECTION_IS_UP)}"


def device_count_query() -> str:
    return f"count({with_instance(ARP_DEVICES)})"


def lease_count_query() -> str:
    return f"sum({with_instance(DNSMASQ_LEASES)})"


def connected_devices_query() -> str:
    return (
        f"label_del({ARP_DEVICES} + on(ip_addr) group_left(hostname) {HOSTNAMES}, "
        '"job", "instance")'
    )


def dhcp_leases_query() -> str:
    return f'label_del({with_instance(DNSMASQ_LEASE_INFO)} * 1000, "job", "instance")'
