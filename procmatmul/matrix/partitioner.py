from procmatmul.matrix.matrix import Matrix


def chunk_sizes(rows: int, n: int) -> list[int]:
    """ first `rows % n` chunks get one extra row """
    if n <= 0:
        raise ValueError(f"number of chunks must be at least 1 (got {n})")
    if n > rows:
        raise ValueError(f"can't split {rows} rows into {n} chunks. Clamp the worker count to the number of rows first")
    base, remainder = divmod(rows, n)
    return [base + 1 if i < remainder else base for i in range(n)]


def split_rows(a: Matrix, n: int) -> list[Matrix]:
    """
    Splits A into {n} contiguous row ranges, in order, covering every row exactly once.
    Chunks are shallow copies: rows are shared with {a}
    """
    chunks: list[Matrix] = []
    start = 0
    for size in chunk_sizes(len(a), n):
        chunks.append(a[start:start + size])
        start += size
    return chunks
