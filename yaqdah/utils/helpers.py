# 도우미 함수

import time


def get_timestamp():
    """현재 타임스탬프를 문자열로 반환"""
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())


def truncate_text(text, max_length=100):
    """텍스트를 일정 길이로 자르고 생략 부호 추가"""
    if len(text) <= max_length:
        return text
    return text[:max_length-3] + "..."


def maps_link(lat, lng):
    return f"https://maps.google.com/?q={lat:.6f},{lng:.6f}"
