"""
Localized string lookup for the UI and the generated Markdown.
"""

from enum import Enum
from typing import Dict


class Language(Enum):
    """Supported UI/document languages."""
    ENGLISH = "en"
    KOREAN = "ko"

    def toggle(self) -> "Language":
        return Language.KOREAN if self == Language.ENGLISH else Language.ENGLISH

    def display(self) -> str:
        return "한국어" if self == Language.KOREAN else "English"


ENGLISH: Dict[str, str] = {
    # Common UI
    "exit": "Exit",
    "settings": "Settings",
    "main_tab": "Main",
    "back": "Back",
    "select": "Select",
    "move_cursor": "Move",
    "refresh": "Refresh",
    "save": "Save",
    "delete": "Delete",
    "add": "Add",
    "cancel": "Cancel",
    "confirm": "Confirm",
    "scroll": "Scroll",
    "page": "Page",
    "generate": "Generate",
    "reorder": "Reorder",
    "change": "Change",
    "single_mode": "Single Mode",
    "add_to_blueprint": "Add to Blueprint",
    "markdown_generate": "Generate Markdown",
    # Screen titles
    "login": "Login",
    "region": "Region",
    "service": "Service",
    "blueprint": "Blueprint",
    "preview": "Preview",
    "language": "Language",
    "language_setting": "Language Setting",
    # Resource kinds
    "ec2": "EC2",
    "network": "Network",
    "security_group": "Security Group",
    "load_balancer": "Load Balancer",
    "ecr": "ECR",
    "asg": "ASG",
    # Status messages
    "loading": "Loading",
    "loading_msg": "Loading...",
    "aws_waiting": "Waiting for AWS response.",
    "processing": "Processing",
    "completing": "Completing",
    "current_loading": "Current: Loading {task}...",
    "refresh_complete": "Refresh complete",
    "save_complete": "Save complete",
    "save_failed": "Save failed",
    "resource_added": "Resource added",
    "resource_deleted": "Resource deleted",
    "blueprint_saved": "Blueprint saved",
    "blueprint_deleted": "Blueprint deleted",
    "blueprint_save_failed": "Blueprint save failed",
    "blueprint_load_failed": "Blueprint load failed",
    "blueprint_not_open": "No blueprint is open",
    "blueprint_name_empty": "Blueprint name must not be empty",
    "settings_saved": "Settings saved",
    "no_resources": "No resources",
    "no_items": "No {kind} found.",
    "new_blueprint": "+ New Blueprint",
    "enter_blueprint_name": "Enter blueprint name:",
    "press_a_to_add": "Press 'a' to add resources.",
    "resources": "resources",
    "resource_not_found": "Resource no longer exists",
    "fetch_failed": "Failed to load {kind}: {error}",
    "network_detail_unavailable": "Network detail unavailable for {vpc_id}",
    "skipped_resources": "Skipped {count} resource(s): {names}",
    "document_generated": "Document generated",
    "aws_login_checking": "Checking AWS login...",
    "aws_login_verified": "AWS login verified",
    "aws_login_required": "AWS login required",
    "aws_configure_hint": "Run 'aws configure' or 'aws sso login'.",
    # Loading tasks
    "loading_list": "Loading {kind} list",
    "refreshing_list": "Refreshing {kind} list",
    "loading_detail": "Loading {kind} details",
    "loading_blueprint_resources": "Loading Blueprint resources",
    "vpc_basic_info": "VPC Basic Info",
    "subnets": "Subnets",
    "internet_gateway": "Internet Gateway",
    "nat_gateway": "NAT Gateway",
    "route_tables": "Route Tables",
    "elastic_ip": "Elastic IP",
    "dns_settings": "DNS Settings",
    # Markdown
    "item": "Item",
    "value": "Value",
    "md_name": "Name",
    "md_state": "State",
    "md_dns_support": "DNS Support",
    "md_dns_hostnames": "DNS Hostnames",
    "md_attached_vpc": "Attached VPC",
    "md_availability_mode": "Availability Mode",
    "md_zonal": "Zonal",
    "md_regional": "Regional",
    "md_ip_auto_scaling": "IP Auto Scaling",
    "md_zone_auto_provisioning": "Zone Auto Provisioning",
    "md_enabled": "Enabled",
    "md_disabled": "Disabled",
    "md_subnet": "Subnet",
    "md_connectivity_type": "Connectivity Type",
    "md_public": "Public",
    "md_private": "Private",
    "md_elastic_ip_allocation_id": "Elastic IP Allocation ID",
    "md_destination": "Destination",
    "md_target": "Target",
    "md_associated_subnets": "Associated Subnets:",
    "md_description": "Description",
    "md_inbound_rules": "Inbound Rules",
    "md_outbound_rules": "Outbound Rules",
    "md_protocol": "Protocol",
    "md_port_range": "Port Range",
    "md_source": "Source",
    "md_dns_name": "DNS Name",
    "md_type": "Type",
    "md_scheme": "Scheme",
    "md_ip_address_type": "IP Address Type",
    "md_port": "Port",
    "md_default_action": "Default Action",
    "md_listeners": "Listeners",
    "md_target_groups": "Target Groups",
    "md_target_type": "Target Type",
    "md_health_check": "Health Check",
    "md_threshold": "Healthy / Unhealthy Threshold",
    "md_targets": "Targets",
    "md_health": "Health",
    "md_ec2_instance": "EC2 Instance",
    "md_instance_type": "Instance Type",
    "md_platform": "Platform",
    "md_architecture": "Architecture",
    "md_key_pair": "Key Pair",
    "md_availability_zone": "Availability Zone",
    "md_availability_zones": "Availability Zones",
    "md_private_ip": "Private IP",
    "md_public_ip": "Public IP",
    "md_security_groups": "Security Groups",
    "md_ebs_optimized": "EBS Optimized",
    "md_monitoring": "Monitoring",
    "md_iam_role": "IAM Role",
    "md_iam_role_detail": "IAM Role Detail",
    "md_attached_policies": "Attached Policies",
    "md_inline_policies": "Inline Policies",
    "md_trust_policy": "Trust Policy",
    "md_policy_name": "Policy Name",
    "md_launch_time": "Launch Time",
    "md_storage": "Storage",
    "md_device": "Device",
    "md_size": "Size",
    "md_volume_type": "Volume Type",
    "md_iops": "IOPS",
    "md_encrypted": "Encrypted",
    "md_delete_on_termination": "Delete on Termination",
    "md_user_data": "User Data",
    "md_tags": "Tags",
    "md_key": "Key",
    "md_yes": "Yes",
    "md_no": "No",
    "md_ecr_repository": "ECR Repository",
    "md_tag_mutability": "Tag Mutability",
    "md_encryption": "Encryption",
    "md_image_count": "Image Count",
    "md_created_at": "Created At",
    "md_auto_scaling_group": "Auto Scaling Group",
    "md_launch_template": "Launch Template",
    "md_launch_configuration": "Launch Configuration",
    "md_min_size": "Min Size",
    "md_max_size": "Max Size",
    "md_desired_capacity": "Desired Capacity",
    "md_default_cooldown": "Default Cooldown",
    "md_health_check_type": "Health Check Type",
    "md_health_check_grace_period": "Health Check Grace Period",
    "md_instances": "Instances",
    "md_instance_id": "Instance ID",
    "md_scaling_policies": "Scaling Policies",
    "md_adjustment_type": "Adjustment Type",
    "md_adjustment_value": "Adjustment Value",
    "md_cooldown": "Cooldown",
    "md_seconds": "{value}s",
    "md_with_count": "{label} ({count})",
    "md_table_of_contents": "Table of Contents",
    "md_region": "Region",
}

KOREAN: Dict[str, str] = {
    "exit": "종료",
    "settings": "설정",
    "main_tab": "메인",
    "back": "뒤로",
    "select": "선택",
    "move_cursor": "이동",
    "refresh": "새로고침",
    "save": "저장",
    "delete": "삭제",
    "add": "추가",
    "cancel": "취소",
    "confirm": "확인",
    "scroll": "스크롤",
    "page": "페이지",
    "generate": "생성",
    "reorder": "순서변경",
    "change": "변경",
    "single_mode": "단일 모드",
    "add_to_blueprint": "블루프린터에 추가",
    "markdown_generate": "마크다운 생성",
    "login": "로그인",
    "region": "리전",
    "service": "서비스",
    "blueprint": "블루프린터",
    "preview": "미리보기",
    "language": "언어",
    "language_setting": "언어 설정",
    "security_group": "보안 그룹",
    "load_balancer": "로드 밸런서",
    "loading": "로딩 중",
    "loading_msg": "로딩 중...",
    "aws_waiting": "AWS 응답을 기다리는 중입니다.",
    "processing": "처리 중",
    "completing": "완료 중",
    "current_loading": "현재: {task} 로딩 중...",
    "refresh_complete": "새로고침 완료",
    "save_complete": "저장 완료",
    "save_failed": "저장 실패",
    "resource_added": "리소스 추가됨",
    "resource_deleted": "리소스 삭제됨",
    "blueprint_saved": "블루프린터 저장됨",
    "blueprint_deleted": "블루프린터 삭제됨",
    "blueprint_save_failed": "블루프린터 저장 실패",
    "blueprint_load_failed": "블루프린터 불러오기 실패",
    "blueprint_not_open": "열린 블루프린터가 없습니다",
    "blueprint_name_empty": "블루프린터 이름을 입력하세요",
    "settings_saved": "설정 저장됨",
    "no_resources": "리소스 없음",
    "no_items": "{kind}이(가) 없습니다.",
    "new_blueprint": "+ 새 블루프린터",
    "enter_blueprint_name": "블루프린터 이름 입력:",
    "press_a_to_add": "'a' 키로 리소스를 추가하세요.",
    "resources": "리소스",
    "resource_not_found": "리소스가 더 이상 존재하지 않습니다",
    "fetch_failed": "{kind} 불러오기 실패: {error}",
    "network_detail_unavailable": "{vpc_id} 네트워크 상세 정보를 가져올 수 없습니다",
    "skipped_resources": "{count}개 리소스 건너뜀: {names}",
    "document_generated": "문서 생성 완료",
    "aws_login_checking": "AWS 로그인 확인 중...",
    "aws_login_verified": "AWS 로그인 확인됨",
    "aws_login_required": "AWS 로그인 필요",
    "aws_configure_hint": "'aws configure' 또는 'aws sso login'을 실행하세요.",
    "loading_list": "{kind} 목록 로딩 중",
    "refreshing_list": "{kind} 목록 새로고침 중",
    "loading_detail": "{kind} 상세 정보 로딩 중",
    "loading_blueprint_resources": "블루프린터 리소스 로딩 중",
    "vpc_basic_info": "VPC 기본 정보",
    "subnets": "서브넷",
    "internet_gateway": "인터넷 게이트웨이",
    "nat_gateway": "NAT 게이트웨이",
    "route_tables": "라우팅 테이블",
    "elastic_ip": "탄력적 IP",
    "dns_settings": "DNS 설정",
    "item": "항목",
    "value": "값",
    "md_name": "이름",
    "md_state": "상태",
    "md_dns_support": "DNS 지원",
    "md_dns_hostnames": "DNS 호스트 이름",
    "md_attached_vpc": "연결된 VPC",
    "md_availability_mode": "가용성 모드",
    "md_zonal": "영역",
    "md_regional": "리전",
    "md_ip_auto_scaling": "IP 자동 확장",
    "md_zone_auto_provisioning": "영역 자동 프로비저닝",
    "md_enabled": "활성화",
    "md_disabled": "비활성화",
    "md_subnet": "서브넷",
    "md_connectivity_type": "연결 유형",
    "md_public": "퍼블릭",
    "md_private": "프라이빗",
    "md_elastic_ip_allocation_id": "탄력적 IP 할당 ID",
    "md_destination": "대상",
    "md_target": "타겟",
    "md_associated_subnets": "연결된 서브넷:",
    "md_description": "설명",
    "md_inbound_rules": "인바운드 규칙",
    "md_outbound_rules": "아웃바운드 규칙",
    "md_protocol": "프로토콜",
    "md_port_range": "포트 범위",
    "md_source": "소스",
    "md_dns_name": "DNS 이름",
    "md_type": "유형",
    "md_scheme": "체계",
    "md_ip_address_type": "IP 주소 유형",
    "md_port": "포트",
    "md_default_action": "기본 작업",
    "md_listeners": "리스너",
    "md_target_groups": "대상 그룹",
    "md_target_type": "대상 유형",
    "md_health_check": "상태 검사",
    "md_threshold": "정상 / 비정상 임계값",
    "md_targets": "대상",
    "md_health": "상태",
    "md_ec2_instance": "EC2 인스턴스",
    "md_instance_type": "인스턴스 유형",
    "md_platform": "플랫폼",
    "md_architecture": "아키텍처",
    "md_key_pair": "키 페어",
    "md_availability_zone": "가용 영역",
    "md_availability_zones": "가용 영역",
    "md_private_ip": "프라이빗 IP",
    "md_public_ip": "퍼블릭 IP",
    "md_security_groups": "보안 그룹",
    "md_ebs_optimized": "EBS 최적화",
    "md_monitoring": "모니터링",
    "md_iam_role": "IAM 역할",
    "md_iam_role_detail": "IAM 역할 상세",
    "md_attached_policies": "연결된 정책",
    "md_inline_policies": "인라인 정책",
    "md_trust_policy": "신뢰 정책",
    "md_policy_name": "정책 이름",
    "md_launch_time": "시작 시간",
    "md_storage": "스토리지",
    "md_device": "디바이스",
    "md_size": "크기",
    "md_volume_type": "볼륨 유형",
    "md_encrypted": "암호화",
    "md_delete_on_termination": "종료 시 삭제",
    "md_user_data": "사용자 데이터",
    "md_tags": "태그",
    "md_key": "키",
    "md_yes": "예",
    "md_no": "아니오",
    "md_ecr_repository": "ECR 리포지토리",
    "md_tag_mutability": "태그 변경 가능성",
    "md_encryption": "암호화",
    "md_image_count": "이미지 수",
    "md_created_at": "생성일",
    "md_launch_template": "시작 템플릿",
    "md_launch_configuration": "시작 구성",
    "md_min_size": "최소 크기",
    "md_max_size": "최대 크기",
    "md_desired_capacity": "원하는 용량",
    "md_default_cooldown": "기본 쿨다운",
    "md_health_check_type": "헬스 체크 유형",
    "md_health_check_grace_period": "헬스 체크 유예 기간",
    "md_instances": "인스턴스",
    "md_instance_id": "인스턴스 ID",
    "md_scaling_policies": "조정 정책",
    "md_adjustment_type": "조정 유형",
    "md_adjustment_value": "조정 값",
    "md_cooldown": "쿨다운",
    "md_seconds": "{value}초",
    "md_with_count": "{label} ({count} 개)",
    "md_table_of_contents": "목차",
    "md_region": "리전",
}

TABLES: Dict[Language, Dict[str, str]] = {
    Language.ENGLISH: ENGLISH,
    Language.KOREAN: KOREAN,
}


class Labeler:
    """Looks up localized strings, falling back to English and then the key."""

    def __init__(self, language: Language = Language.ENGLISH):
        self.language = language

    def text(self, key: str, **values) -> str:
        template = TABLES[self.language].get(key)
        if template is None:
            template = ENGLISH.get(key, key)
        if values:
            return template.format(**values)
        return template

    def current_loading(self, task: str) -> str:
        return self.text("current_loading", task=task)

    def seconds(self, value: int) -> str:
        return self.text("md_seconds", value=value)

    def with_count(self, label: str, count: int) -> str:
        return self.text("md_with_count", label=label, count=count)

    def yes_no(self, flag: bool) -> str:
        return self.text("md_yes") if flag else self.text("md_no")

    def enabled(self, flag: bool) -> str:
        return self.text("md_enabled") if flag else self.text("md_disabled")
