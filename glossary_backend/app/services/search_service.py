"""
词条搜索（纯函数，不访问数据库）

两级匹配：
1. 整句子串匹配：查询词（去空格、小写）出现在短语 / 释义 / 用法说明任一字段里
2. 如果第一级一个都没命中，按空白拆词，去掉长度 <= 1 的词，
   要求「每个词」都至少出现在某一个字段里

结果保持原有顺序，不做打分排序。
"""
from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


def normalize_query(query: Optional[str]) -> str:
    if not query:
        return ""
    return query.strip().lower()


def entry_haystacks(entry) -> Tuple[str, str, str]:
    """返回参与匹配的三个字段（小写），usage_context 为空时按空串处理"""
    return (
        (entry.phrase or "").lower(),
        (entry.translation or "").lower(),
        (entry.usage_context or "").lower(),
    )


def query_terms(normalized_query: str) -> List[str]:
    # 单字符的词太宽泛，直接丢掉
    return [term for term in normalized_query.split() if len(term) > 1]


def _contains(haystacks: Tuple[str, str, str], needle: str) -> bool:
    return any(needle in field for field in haystacks)


def search_entries(entries: Sequence[T], query: Optional[str]) -> List[T]:
    needle = normalize_query(query)
    if not needle:
        return list(entries)

    indexed = [(entry, entry_haystacks(entry)) for entry in entries]

    # 第一级：整句子串
    exact_matches = [entry for entry, fields in indexed if _contains(fields, needle)]
    if exact_matches:
        return exact_matches

    # 第二级：所有词都要命中
    terms = query_terms(needle)
    if not terms:
        # 只有单字符词时退化为不过滤（保留原有行为）
        return list(entries)

    return [
        entry for entry, fields in indexed
        if all(_contains(fields, term) for term in terms)
    ]
