"""Repository 패키지

아젠다 저장소 구현체들을 모아둔 패키지.
"""
