"""Category classification, one-line summaries and detail sections."""

from typing import Any

from ecstimeline.normalizer.events import EventCategory
from ecstimeline.normalizer.fields import (
    ACTION_FIELDS,
    CATEGORY_FIELDS,
    get_first_string,
    get_nested_string,
    get_nested_value,
)

CATEGORY_MAP: dict[str, EventCategory] = {
    "network": "network",
    "file": "file",
    "process": "process",
    "authentication": "authentication",
    "session": "authentication",
    "registry": "registry",
    "iam": "authentication",
    "intrusion_detection": "network",
    "malware": "process",
    "package": "file",
    "web": "network",
    "database": "network",
}

# (section, presence paths, fields). An empty presence tuple means the
# section is kept whenever any of its fields holds a value.
DETAIL_SECTIONS: tuple[tuple[str, tuple[str, ...], tuple[tuple[str, str], ...]], ...] = (
    ("event", (), (
        ("action", "event.action"),
        ("category", "event.category"),
        ("type", "event.type"),
        ("outcome", "event.outcome"),
        ("reason", "event.reason"),
        ("code", "event.code"),
        ("provider", "event.provider"),
        ("dataset", "event.dataset"),
        ("module", "event.module"),
        ("kind", "event.kind"),
        ("severity", "event.severity"),
        ("risk_score", "event.risk_score"),
    )),
    ("host", (), (
        ("hostname", "host.hostname"),
        ("name", "host.name"),
        ("id", "host.id"),
        ("ip", "host.ip"),
        ("mac", "host.mac"),
        ("os", "host.os.name"),
        ("os_version", "host.os.version"),
        ("os_family", "host.os.family"),
        ("os_platform", "host.os.platform"),
        ("architecture", "host.architecture"),
    )),
    ("network", ("source.ip", "destination.ip"), (
        ("source_ip", "source.ip"),
        ("source_port", "source.port"),
        ("source_domain", "source.domain"),
        ("source_bytes", "source.bytes"),
        ("source_packets", "source.packets"),
        ("source_geo_country", "source.geo.country_name"),
        ("source_geo_city", "source.geo.city_name"),
        ("dest_ip", "destination.ip"),
        ("dest_port", "destination.port"),
        ("dest_domain", "destination.domain"),
        ("dest_bytes", "destination.bytes"),
        ("dest_packets", "destination.packets"),
        ("dest_geo_country", "destination.geo.country_name"),
        ("dest_geo_city", "destination.geo.city_name"),
        ("protocol", "network.protocol"),
        ("transport", "network.transport"),
        ("type", "network.type"),
        ("direction", "network.direction"),
        ("community_id", "network.community_id"),
        ("bytes", "network.bytes"),
        ("packets", "network.packets"),
        ("application", "network.application"),
    )),
    ("process", ("process.name", "process.pid"), (
        ("name", "process.name"),
        ("pid", "process.pid"),
        ("executable", "process.executable"),
        ("command_line", "process.command_line"),
        ("args", "process.args"),
        ("working_directory", "process.working_directory"),
        ("entity_id", "process.entity_id"),
        ("exit_code", "process.exit_code"),
        ("parent_name", "process.parent.name"),
        ("parent_pid", "process.parent.pid"),
        ("parent_executable", "process.parent.executable"),
        ("parent_command_line", "process.parent.command_line"),
        ("hash_md5", "process.hash.md5"),
        ("hash_sha1", "process.hash.sha1"),
        ("hash_sha256", "process.hash.sha256"),
    )),
    ("file", ("file.path", "file.name"), (
        ("path", "file.path"),
        ("name", "file.name"),
        ("directory", "file.directory"),
        ("extension", "file.extension"),
        ("mime_type", "file.mime_type"),
        ("size", "file.size"),
        ("target_path", "file.target_path"),
        ("type", "file.type"),
        ("hash_md5", "file.hash.md5"),
        ("hash_sha1", "file.hash.sha1"),
        ("hash_sha256", "file.hash.sha256"),
    )),
    ("user", ("user.name", "user.id"), (
        ("name", "user.name"),
        ("full_name", "user.full_name"),
        ("domain", "user.domain"),
        ("id", "user.id"),
        ("email", "user.email"),
        ("roles", "user.roles"),
        ("target_name", "user.target.name"),
        ("target_domain", "user.target.domain"),
        ("effective_name", "user.effective.name"),
    )),
    ("dns", ("dns.question.name",), (
        ("question_name", "dns.question.name"),
        ("question_type", "dns.question.type"),
        ("question_class", "dns.question.class"),
        ("response_code", "dns.response_code"),
        ("resolved_ip", "dns.resolved_ip"),
        ("answers", "dns.answers"),
    )),
    ("url", ("url.full", "url.domain"), (
        ("full", "url.full"),
        ("domain", "url.domain"),
        ("path", "url.path"),
        ("query", "url.query"),
        ("scheme", "url.scheme"),
        ("port", "url.port"),
    )),
    ("http", ("http.request.method", "http.response.status_code"), (
        ("method", "http.request.method"),
        ("status_code", "http.response.status_code"),
        ("request_body_content", "http.request.body.content"),
        ("response_body_content", "http.response.body.content"),
        ("user_agent", "user_agent.original"),
    )),
    ("registry", ("registry.path", "registry.key"), (
        ("path", "registry.path"),
        ("key", "registry.key"),
        ("value", "registry.value"),
        ("data_strings", "registry.data.strings"),
        ("data_type", "registry.data.type"),
        ("hive", "registry.hive"),
    )),
    ("threat", ("threat.indicator", "threat.technique.name"), (
        ("framework", "threat.framework"),
        ("tactic_name", "threat.tactic.name"),
        ("tactic_id", "threat.tactic.id"),
        ("technique_name", "threat.technique.name"),
        ("technique_id", "threat.technique.id"),
        ("indicator", "threat.indicator"),
    )),
    ("observer", ("observer.name", "observer.type"), (
        ("name", "observer.name"),
        ("hostname", "observer.hostname"),
        ("ip", "observer.ip"),
        ("type", "observer.type"),
        ("vendor", "observer.vendor"),
        ("product", "observer.product"),
        ("version", "observer.version"),
    )),
    ("rule", ("rule.name", "rule.id"), (
        ("name", "rule.name"),
        ("id", "rule.id"),
        ("category", "rule.category"),
        ("description", "rule.description"),
        ("ruleset", "rule.ruleset"),
        ("reference", "rule.reference"),
    )),
)


def extract_category(record: dict[str, Any]) -> EventCategory:
    """Map event.category (or event.type) onto the timeline categories."""
    value = get_first_string(record, CATEGORY_FIELDS)
    if not isinstance(value, str):
        return "other"
    return CATEGORY_MAP.get(value, "other")


def extract_summary(record: dict[str, Any]) -> str:
    """Build a one-line, human-readable description of the event.

    Starts from event.action (or event.type) and appends process, file,
    destination, DNS query or URL domain and acting user when present.
    """
    action = get_first_string(record, ACTION_FIELDS)
    process_name = get_nested_string(record, "process.name")
    file_name = get_nested_string(record, "file.name")
    user_name = get_nested_string(record, "user.name")
    dest_ip = get_nested_string(record, "destination.ip")
    dest_port = get_nested_string(record, "destination.port")
    dns_query = get_nested_string(record, "dns.question.name")
    url_domain = get_nested_string(record, "url.domain")

    summary = str(action) if action else "Event"

    if process_name:
        summary += f" [{process_name}]"
    if file_name:
        summary += f" {file_name}"
    if dest_ip and dest_port:
        summary += f" -> {dest_ip}:{dest_port}"
    elif dest_ip:
        summary += f" -> {dest_ip}"
    if dns_query:
        summary += f" ({dns_query})"
    elif url_domain:
        summary += f" ({url_domain})"
    # SYSTEM, LocalSystem, ...
    if user_name and "SYSTEM" not in str(user_name).upper():
        summary += f" by {user_name}"

    return summary


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def extract_details(record: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Extract detail-panel fields grouped by ECS field set.

    Sections without a qualifying signal are left out entirely.
    """
    details: dict[str, dict[str, Any]] = {}

    for section, presence, fields in DETAIL_SECTIONS:
        if presence and not any(_has_value(get_nested_value(record, p)) for p in presence):
            continue

        values = {name: get_nested_value(record, path) for name, path in fields}
        if not presence and not any(_has_value(v) for v in values.values()):
            continue

        details[section] = values

    return details
