"""
Slug生成工具
"""
import re
import unicodedata

DEFAULT_SEPARATOR = "-"


def slugify(text: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """
    将标题/名称转换为URL安全的slug

    规则：
    1. 去掉重音符号并转为ASCII
    2. 全部小写，"@" 转为 "at"，下划线视为分隔符
    3. 删除字母、数字、空白和分隔符以外的字符
    4. 连续的空白/分隔符合并为一个分隔符，并去掉首尾分隔符

    对同一输入多次计算结果相同，对slug再次计算结果不变。

    Args:
        text: 原始文本
        separator: 分隔符

    Returns:
        str: slug，文本中没有可用字符时返回空字符串
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()

    text = text.replace("@", f"{separator}at{separator}")
    text = text.replace("_", separator)

    sep = re.escape(separator)
    text = re.sub(rf"[^a-z0-9\s{sep}]", "", text)
    text = re.sub(rf"[\s{sep}]+", separator, text)

    return text.strip(separator)
