def jaccard_similarity(text_a: str, text_b: str) -> float:
    """Jaccard index of the word sets of two strings, in ``[0, 1]``.

    Two texts without any words are treated as unrelated (``0.0``).
    """
    words_a = set(text_a.lower().split())
    words_b = set(text_b.lower().split())

    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)
