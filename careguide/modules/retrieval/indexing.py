"""Text assembled from content items for embedding."""

from careguide.modules.retrieval.schemas import ContentItem


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part).strip()


def build_search_text(item: ContentItem) -> str:
    """Return the text whose embedding represents a content item.

    Articles contribute title, body, category and tags. FAQs contribute
    question, answer and category. Videos contribute title, summary, key
    topics and category.
    """
    if item.type == "article":
        tags = " ".join(item.metadata.get("tags") or [])
        return _join(item.title, item.content, item.category, tags)

    if item.type == "video":
        topics = " ".join(item.metadata.get("key_topics") or [])
        return _join(item.title, item.content, topics, item.category)

    return _join(item.title, item.content, item.category)
