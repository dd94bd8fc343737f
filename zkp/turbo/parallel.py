"""
행 단위 데이터 병렬 맵
=======================

순열 인자와 몫 다항식의 행 계산은 서로 독립이다 (다음 행 조회는 이미 계산된
불변 데이터를 읽기만 한다). 입력을 인덱스 정렬된 연속 청크로 나눠
ThreadPoolExecutor에서 처리하고, 결과를 입력 순서대로 이어 붙인다.
공유 가변 상태나 락은 없다.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import repeat


logger = logging.getLogger(__name__)


def _apply_chunk(fn, chunk):
    return [fn(item) for item in chunk]


def parallel_map(fn, items, workers=1, chunk_size=64):
    """[fn(x) for x in items]와 같은 결과를 청크 단위 병렬로 계산한다.

    Args:
        fn: 항목 하나를 받아 값을 반환하는 순수 함수
        items: 입력 시퀀스
        workers: 스레드 수 (1 이하면 직렬)
        chunk_size: 청크당 항목 수

    Returns:
        list: 입력과 인덱스가 정렬된 결과
    """
    items = list(items)
    if workers <= 1 or len(items) <= chunk_size:
        return [fn(item) for item in items]

    chunks = [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]
    logger.debug("parallel_map: %d items, %d chunks, %d workers", len(items), len(chunks), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = executor.map(_apply_chunk, repeat(fn), chunks)
        return [value for chunk in results for value in chunk]
