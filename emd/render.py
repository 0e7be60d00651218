"""
Markdown rendering of resource details.

Each render_* function turns one detail into a Markdown section that
starts with a "## <kind> (<name>)" heading. Nothing here does I/O.
"""

from typing import Callable, Dict, List, Sequence

from .catalog import (
    AsgDetail, Ec2Detail, EcrDetail, LoadBalancerDetail, NetworkDetail,
    ResourceDetail, SecurityGroupDetail, SecurityRule, Tags,
)
from .i18n import Labeler, Language


def _row(*cells) -> str:
    return "| " + " | ".join(str(c) for c in cells) + " |"


def _table(headers: Sequence[str], rows: List[Sequence]) -> List[str]:
    lines = [_row(*headers), "|" + "|".join(":---" for _ in headers) + "|"]
    lines.extend(_row(*r) for r in rows)
    return lines


def _item_table(t: Labeler, rows: List[Sequence]) -> List[str]:
    return _table([t.text("item"), t.text("value")], rows)


def _tags_section(t: Labeler, tags: Tags) -> List[str]:
    """Tag table without the Name tag; empty when nothing is left."""
    visible = [(k, v) for k, v in tags if k != "Name"]
    if not visible:
        return []
    return ["", f"### {t.text('md_tags')}", ""] + _table([t.text("md_key"), t.text("value")], visible)


def _or_dash(value) -> str:
    if value is None or value == "":
        return "-"
    return str(value)


def render_ec2(detail: Ec2Detail, t: Labeler) -> str:
    lines = [f"## {t.text('md_ec2_instance')} ({detail.name or detail.instance_id})", ""]
    rows = [
        (t.text("md_name"), _or_dash(detail.name)),
        ("Instance ID", detail.instance_id),
        (t.text("md_instance_type"), detail.instance_type),
        ("AMI", detail.ami),
        (t.text("md_platform"), detail.platform),
        (t.text("md_architecture"), detail.architecture),
        (t.text("md_key_pair"), _or_dash(detail.key_pair)),
        ("VPC", detail.vpc),
        (t.text("md_subnet"), detail.subnet),
        (t.text("md_availability_zone"), detail.az),
        (t.text("md_public_ip"), _or_dash(detail.public_ip)),
        (t.text("md_private_ip"), _or_dash(detail.private_ip)),
        (t.text("md_security_groups"), ", ".join(detail.security_groups) or "-"),
        (t.text("md_state"), detail.state),
        (t.text("md_ebs_optimized"), t.yes_no(detail.ebs_optimized)),
        (t.text("md_monitoring"), detail.monitoring),
        (t.text("md_iam_role"), _or_dash(detail.iam_role)),
        (t.text("md_launch_time"), detail.launch_time),
    ]
    lines += _item_table(t, rows)

    if detail.volumes:
        lines += ["", f"### {t.text('md_storage')}", ""]
        lines += _table(
            [t.text("md_device"), "Volume ID", t.text("md_size"), t.text("md_volume_type"),
             t.text("md_iops"), t.text("md_encrypted"), t.text("md_delete_on_termination")],
            [
                (v.device_name, v.volume_id, f"{v.size_gb} GiB", v.volume_type,
                 _or_dash(v.iops), t.yes_no(v.encrypted), t.yes_no(v.delete_on_termination))
                for v in detail.volumes
            ],
        )

    role = detail.iam_role_detail
    if role is not None:
        lines += ["", f"### {t.text('md_iam_role_detail')}", ""]
        lines += _item_table(t, [(t.text("md_name"), role.name), ("ARN", role.arn)])
        if role.assume_role_policy:
            lines += ["", f"#### {t.text('md_trust_policy')}", "", "```json", role.assume_role_policy, "```"]
        if role.attached_policies:
            lines += ["", f"#### {t.text('md_attached_policies')}", ""]
            lines += _table([t.text("md_policy_name"), "ARN"],
                            [(p.name, p.arn) for p in role.attached_policies])
        if role.inline_policies:
            lines += ["", f"#### {t.text('md_inline_policies')}"]
            for policy in role.inline_policies:
                lines += ["", f"**{policy.name}**", "", "```json", policy.document, "```"]

    if detail.user_data:
        lines += ["", f"### {t.text('md_user_data')}", "", "```bash", detail.user_data.rstrip("\n"), "```"]

    lines += _tags_section(t, detail.tags)
    return "\n".join(lines) + "\n"


def render_network(detail: NetworkDetail, t: Labeler) -> str:
    lines = [f"## VPC ({detail.name or detail.id})", ""]
    lines += _item_table(t, [
        (t.text("md_name"), _or_dash(detail.name)),
        ("VPC ID", detail.id),
        ("CIDR", detail.cidr),
        (t.text("md_state"), detail.state),
        (t.text("md_dns_support"), t.enabled(detail.dns_support)),
        (t.text("md_dns_hostnames"), t.enabled(detail.dns_hostnames)),
    ])

    if detail.subnets:
        lines += ["", f"### {t.with_count(t.text('subnets'), len(detail.subnets))}", ""]
        lines += _table(
            [t.text("md_name"), "ID", "CIDR", t.text("md_availability_zone")],
            [(_or_dash(s.name), s.id, s.cidr, s.az) for s in detail.subnets],
        )

    if detail.igws:
        lines += ["", f"### {t.text('internet_gateway')}", ""]
        lines += _table(
            [t.text("md_name"), "ID", t.text("md_attached_vpc")],
            [(_or_dash(g.name), g.id, g.vpc_id) for g in detail.igws],
        )

    for nat in detail.nats:
        mode = t.text("md_regional") if nat.availability_mode.lower() == "regional" else t.text("md_zonal")
        connectivity = t.text("md_private") if nat.connectivity_type == "private" else t.text("md_public")
        lines += ["", f"### {t.text('nat_gateway')} ({nat.name or nat.id})", ""]
        lines += _item_table(t, [
            (t.text("md_name"), _or_dash(nat.name)),
            ("ID", nat.id),
            (t.text("md_state"), nat.state),
            (t.text("md_availability_mode"), mode),
            (t.text("md_ip_auto_scaling"), t.enabled(nat.auto_scaling_ips == "enabled")),
            (t.text("md_zone_auto_provisioning"), t.enabled(nat.auto_provision_zones == "enabled")),
            (t.text("md_subnet"), _or_dash(nat.subnet_id)),
            (t.text("md_connectivity_type"), connectivity),
            (t.text("md_public_ip"), _or_dash(nat.public_ip)),
            (t.text("md_elastic_ip_allocation_id"), _or_dash(nat.allocation_id)),
        ])
        lines += _tags_section(t, nat.tags)

    for table in detail.route_tables:
        lines += ["", f"### {t.text('route_tables')} ({table.name or table.id})", ""]
        lines += _table(
            [t.text("md_destination"), t.text("md_target"), t.text("md_state")],
            [(r.destination, r.target, _or_dash(r.state)) for r in table.routes],
        )
        if table.associations:
            lines += ["", t.text("md_associated_subnets")]
            lines += [f"- {subnet}" for subnet in table.associations]

    if detail.eips:
        lines += ["", f"### {t.text('elastic_ip')}", ""]
        lines += _table(
            [t.text("md_name"), t.text("md_public_ip"), "Instance ID", t.text("md_private_ip")],
            [(_or_dash(e.name), e.public_ip, _or_dash(e.instance_id), _or_dash(e.private_ip))
             for e in detail.eips],
        )

    lines += _tags_section(t, detail.tags)
    return "\n".join(lines) + "\n"


def security_group_display_name(detail: SecurityGroupDetail) -> str:
    if not detail.name or detail.name == detail.id:
        return f"NULL - {detail.id}"
    return f"{detail.name} - {detail.id}"


def _rules_section(t: Labeler, title_key: str, peer_key: str, rules: List[SecurityRule]) -> List[str]:
    if not rules:
        return []
    lines = ["", f"### {t.text(title_key)}", ""]
    lines += _table(
        [t.text("md_protocol"), t.text("md_port_range"), t.text(peer_key), t.text("md_description")],
        [(r.protocol, r.port_range, r.source_dest, r.description) for r in rules],
    )
    return lines


def render_security_group(detail: SecurityGroupDetail, t: Labeler) -> str:
    display_name = security_group_display_name(detail)
    lines = [f"## {t.text('security_group')} ({display_name})", ""]
    lines += _item_table(t, [
        (t.text("md_name"), display_name),
        (t.text("md_description"), detail.description),
        ("VPC ID", detail.vpc_id),
    ])
    lines += _rules_section(t, "md_inbound_rules", "md_source", detail.inbound_rules)
    lines += _rules_section(t, "md_outbound_rules", "md_destination", detail.outbound_rules)
    return "\n".join(lines) + "\n"


def render_load_balancer(detail: LoadBalancerDetail, t: Labeler) -> str:
    lines = [f"## {t.text('load_balancer')} ({detail.name})", ""]
    lines += _item_table(t, [
        (t.text("md_name"), detail.name),
        ("ARN", detail.arn),
        (t.text("md_dns_name"), detail.dns_name),
        (t.text("md_type"), detail.lb_type),
        (t.text("md_scheme"), detail.scheme),
        ("VPC ID", detail.vpc_id),
        (t.text("md_ip_address_type"), detail.ip_address_type),
        (t.text("md_state"), detail.state),
        (t.text("md_availability_zones"), ", ".join(detail.availability_zones) or "-"),
        (t.text("md_security_groups"), ", ".join(detail.security_groups) or "-"),
    ])

    if detail.listeners:
        lines += ["", f"### {t.text('md_listeners')}", ""]
        lines += _table(
            [t.text("md_protocol"), t.text("md_port"), t.text("md_default_action")],
            [(listener.protocol, listener.port, listener.default_action) for listener in detail.listeners],
        )

    for tg in detail.target_groups:
        lines += ["", f"### {t.text('md_target_groups')} ({tg.name})", ""]
        health_check = f"{tg.health_check_protocol} {tg.health_check_path}".strip() or "-"
        lines += _item_table(t, [
            (t.text("md_name"), tg.name),
            (t.text("md_protocol"), tg.protocol),
            (t.text("md_port"), tg.port),
            (t.text("md_target_type"), tg.target_type),
            (t.text("md_health_check"), health_check),
            (t.text("md_threshold"), f"{tg.healthy_threshold} / {tg.unhealthy_threshold}"),
        ])
        if tg.targets:
            lines += ["", f"#### {t.with_count(t.text('md_targets'), len(tg.targets))}", ""]
            lines += _table(
                ["ID", t.text("md_port"), t.text("md_health")],
                [(target.id, _or_dash(target.port), target.health) for target in tg.targets],
            )

    return "\n".join(lines) + "\n"


def ecr_encryption_display(detail: EcrDetail) -> str:
    if detail.encryption_type == "KMS":
        if detail.kms_key:
            return f"AWS KMS ({detail.kms_key})"
        return "AWS KMS"
    return "AES-256"


def render_ecr(detail: EcrDetail, t: Labeler) -> str:
    lines = [f"## {t.text('md_ecr_repository')} ({detail.name})", ""]
    lines += _item_table(t, [
        (t.text("md_name"), detail.name),
        ("URI", detail.uri),
        (t.text("md_tag_mutability"), detail.tag_mutability),
        (t.text("md_encryption"), ecr_encryption_display(detail)),
        (t.text("md_image_count"), detail.image_count),
        (t.text("md_created_at"), detail.created_at),
    ])
    return "\n".join(lines) + "\n"


def target_group_name_from_arn(arn: str) -> str:
    """arn:...:targetgroup/<name>/<id> -> <name>; anything else is returned as is."""
    parts = arn.split("/")
    return parts[1] if len(parts) > 1 else arn


def render_asg(detail: AsgDetail, t: Labeler) -> str:
    lines = [f"## {t.text('md_auto_scaling_group')} ({detail.name})", ""]
    rows = [(t.text("md_name"), detail.name)]
    if detail.launch_template_name:
        if detail.launch_template_id:
            rows.append((t.text("md_launch_template"),
                         f"{detail.launch_template_name} (`{detail.launch_template_id}`)"))
        else:
            rows.append((t.text("md_launch_template"), detail.launch_template_name))
    elif detail.launch_config_name:
        rows.append((t.text("md_launch_configuration"), detail.launch_config_name))
    rows += [
        (t.text("md_min_size"), detail.min_size),
        (t.text("md_max_size"), detail.max_size),
        (t.text("md_desired_capacity"), detail.desired_capacity),
        (t.text("md_default_cooldown"), t.seconds(detail.default_cooldown)),
        (t.text("md_health_check_type"), detail.health_check_type),
        (t.text("md_health_check_grace_period"), t.seconds(detail.health_check_grace_period)),
        (t.text("md_created_at"), detail.created_time),
    ]
    lines += _item_table(t, rows)

    if detail.availability_zones:
        lines += ["", f"### {t.text('md_availability_zones')}", ""]
        lines += [f"- {az}" for az in detail.availability_zones]

    if detail.instances:
        lines += ["", f"### {t.with_count(t.text('md_instances'), len(detail.instances))}", ""]
        lines += _table([t.text("md_instance_id")], [(f"`{i}`",) for i in detail.instances])

    if detail.target_group_arns:
        lines += ["", f"### {t.text('md_target_groups')}", ""]
        lines += [f"- {target_group_name_from_arn(arn)}" for arn in detail.target_group_arns]

    if detail.scaling_policies:
        lines += ["", f"### {t.text('md_scaling_policies')}", ""]
        lines += _table(
            [t.text("md_name"), t.text("md_type"), t.text("md_adjustment_type"),
             t.text("md_adjustment_value"), t.text("md_cooldown")],
            [
                (p.name, p.policy_type, _or_dash(p.adjustment_type), _or_dash(p.scaling_adjustment),
                 t.seconds(p.cooldown) if p.cooldown is not None else "-")
                for p in detail.scaling_policies
            ],
        )

    lines += _tags_section(t, detail.tags)
    return "\n".join(lines) + "\n"


_RENDERERS: Dict[type, Callable[[ResourceDetail, Labeler], str]] = {
    Ec2Detail: render_ec2,
    NetworkDetail: render_network,
    SecurityGroupDetail: render_security_group,
    LoadBalancerDetail: render_load_balancer,
    EcrDetail: render_ecr,
    AsgDetail: render_asg,
}


def render_detail(detail: ResourceDetail, language: Language = Language.ENGLISH) -> str:
    """
    Render one resource detail as a Markdown section.

    Args:
        detail: Any populated detail value
        language: Label language

    Returns:
        Markdown text ending in a newline
    """
    renderer = _RENDERERS.get(type(detail))
    if renderer is None:
        raise TypeError(f"No renderer for {type(detail).__name__}")
    return renderer(detail, Labeler(language))
