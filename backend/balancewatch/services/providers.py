"""
平台目录模块
静态注册所有支持的 AI API 平台配置，以及阿里云地区表和货币符号表
添加新平台时，需要：
1. 在 PROVIDERS 中添加平台配置
2. 在 adapter_factory.py 中注册对应的适配器类
"""
from enum import Enum
from types import MappingProxyType
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict


class AuthKind(str, Enum):
    """平台认证方式"""
    BEARER = "bearer"  # Authorization: Bearer <token>
    ALIYUN_SIGNED = "aliyun_signed"  # 阿里云 RPC 风格 HMAC-SHA1 签名


class BearerKeyRule(BaseModel):
    """Bearer 密钥校验规则"""
    model_config = ConfigDict(frozen=True)

    prefix: Optional[str] = None  # 密钥前缀，如 DeepSeek 的 "sk-"
    min_length: Optional[int] = None  # 密钥最小长度，None 表示不限制


class SignedKeyRule(BaseModel):
    """签名凭据校验规则"""
    model_config = ConfigDict(frozen=True)

    access_key_id_prefix: str
    access_key_id_length: Tuple[int, int]  # 闭区间 (最小, 最大)
    access_key_secret_length: Tuple[int, int]


class ProviderConfig(BaseModel):
    """
    平台配置模型
    进程启动时定义，运行期间不可变
    """
    model_config = ConfigDict(frozen=True)

    id: str  # 平台标识符，唯一
    name: str  # 平台名称
    display_name: str  # 显示名称
    endpoint: str  # 余额查询端点
    auth_kind: AuthKind
    credential_rule: Union[BearerKeyRule, SignedKeyRule]
    storage_key: str  # 凭据在存储中的键名
    console_url: str  # 控制台地址，用于获取密钥
    description: str
    widget_parameter: str  # 小组件参数值
    default_currency: str = "USD"  # 失败记录使用的货币


class Region(BaseModel):
    """阿里云地区"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    endpoint: str  # 不含协议的主机名


DEEPSEEK = ProviderConfig(
    id="deepseek",
    name="DeepSeek",
    display_name="DeepSeek API",
    endpoint="https://api.deepseek.com/user/balance",
    auth_kind=AuthKind.BEARER,
    credential_rule=BearerKeyRule(prefix="sk-", min_length=20),
    storage_key="deepseek_api_key",
    console_url="https://platform.deepseek.com",
    description="DeepSeek AI API密钥，用于查询余额和调用AI服务。在桌面小组件中设置参数值为1显示此API余额。",
    widget_parameter="1",
)

OPENROUTER = ProviderConfig(
    id="openrouter",
    name="OpenRouter",
    display_name="OpenRouter API",
    endpoint="https://openrouter.ai/api/v1/credits",
    auth_kind=AuthKind.BEARER,
    credential_rule=BearerKeyRule(prefix="sk-or-"),
    storage_key="openrouter_api_key",
    console_url="https://openrouter.ai/keys",
    description="OpenRouter API密钥，用于查询余额和访问多个AI模型。在桌面小组件中设置参数值为2显示此API余额。",
    widget_parameter="2",
)

ALIYUN = ProviderConfig(
    id="aliyun",
    name="阿里云",
    display_name="阿里云余额",
    endpoint="https://business.aliyuncs.com",  # BSS OpenAPI 默认端点
    auth_kind=AuthKind.ALIYUN_SIGNED,
    credential_rule=SignedKeyRule(
        access_key_id_prefix="LTAI",
        access_key_id_length=(16, 32),
        access_key_secret_length=(30, 40),
    ),
    storage_key="aliyun_api_credentials",  # 存储 JSON 格式的凭据
    console_url="https://ram.console.aliyun.com/users",
    default_currency="CNY",
    description="阿里云AccessKey ID和Secret，用于查询账户余额。在桌面小组件中设置参数值为3显示此API余额。",
    widget_parameter="3",
)

# 支持的平台列表（顺序即展示顺序）
PROVIDERS: Tuple[ProviderConfig, ...] = (DEEPSEEK, OPENROUTER, ALIYUN)

_PROVIDERS_BY_ID = MappingProxyType({provider.id: provider for provider in PROVIDERS})
_PROVIDERS_BY_WIDGET_PARAMETER = MappingProxyType(
    {provider.widget_parameter: provider for provider in PROVIDERS}
)

_MAINLAND_ENDPOINT = "business.aliyuncs.com"
_INTERNATIONAL_ENDPOINT = "business.ap-southeast-1.aliyuncs.com"

ALIYUN_DEFAULT_REGION = "cn-hangzhou"
ALIYUN_DEFAULT_ENDPOINT = f"https://{_MAINLAND_ENDPOINT}"

ALIYUN_REGIONS: Tuple[Region, ...] = (
    Region(id="cn-hangzhou", name="华东1（杭州）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-beijing", name="华北2（北京）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-shanghai", name="华东2（上海）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-shenzhen", name="华南1（深圳）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-qingdao", name="华北1（青岛）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-zhangjiakou", name="华北3（张家口）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-huhehaote", name="华北5（呼和浩特）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-wulanchabu", name="华北6（乌兰察布）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-chengdu", name="西南1（成都）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="cn-hongkong", name="中国（香港）", endpoint=_MAINLAND_ENDPOINT),
    Region(id="ap-southeast-1", name="新加坡", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="ap-northeast-1", name="日本（东京）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="ap-southeast-2", name="澳大利亚（悉尼）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="ap-southeast-3", name="马来西亚（吉隆坡）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="ap-southeast-5", name="印度尼西亚（雅加达）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="ap-south-1", name="印度（孟买）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="us-west-1", name="美国（硅谷）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="us-east-1", name="美国（弗吉尼亚）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="eu-west-1", name="英国（伦敦）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="eu-central-1", name="德国（法兰克福）", endpoint=_INTERNATIONAL_ENDPOINT),
    Region(id="me-east-1", name="阿联酋（迪拜）", endpoint=_INTERNATIONAL_ENDPOINT),
)

_REGIONS_BY_ID = MappingProxyType({region.id: region for region in ALIYUN_REGIONS})

# 货币符号映射，未收录的货币原样返回
CURRENCY_SYMBOLS = MappingProxyType({
    "CNY": "¥",
    "RMB": "¥",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "HKD": "HK$",
    "SGD": "S$",
    "AUD": "A$",
    "CAD": "C$",
    "KRW": "₩",
    "RUB": "₽",
    "INR": "₹",
})


def lookup(provider_id: str) -> Optional[ProviderConfig]:
    """
    根据平台标识符查找配置
    :param provider_id: 平台标识符（如 "deepseek"）
    :return: 平台配置，未知标识符返回 None（调用方应视为配置错误）
    """
    return _PROVIDERS_BY_ID.get(provider_id)


def list_providers() -> Tuple[ProviderConfig, ...]:
    return PROVIDERS


def resolve_widget_parameter(parameter: Optional[str]) -> ProviderConfig:
    """
    根据小组件参数选择平台
    参数1: DeepSeek, 参数2: OpenRouter, 参数3: 阿里云，其他值默认使用 DeepSeek
    """
    if parameter is not None:
        parameter = parameter.strip()
    return _PROVIDERS_BY_WIDGET_PARAMETER.get(parameter, DEEPSEEK)


def endpoint_for_region(region_id: str) -> str:
    """获取地区对应的端点，未知地区回退到默认端点"""
    region = _REGIONS_BY_ID.get(region_id)
    if region is None:
        return ALIYUN_DEFAULT_ENDPOINT
    return f"https://{region.endpoint}"


def region_name(region_id: str) -> str:
    region = _REGIONS_BY_ID.get(region_id)
    return region.name if region else region_id


def currency_symbol(code: str) -> str:
    return CURRENCY_SYMBOLS.get(code, code)
