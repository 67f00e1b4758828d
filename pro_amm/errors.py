"""
ProAMM 오류 정의

모든 오류는 즉시 실패(fail-fast)하며, 풀 엔진은 작업 시작 전 상태로 되돌린 뒤
오류를 그대로 호출자에게 전파합니다.

분류:
- PoolValidationError: 잘못된 범위, 정렬되지 않은 틱, 0 수량, 잘못된 가격 제한
- CapacityError: 틱당 유동성 상한 초과, 부족한 유동성
- SettlementError: 콜백이 요구 수량만큼 잔고를 늘리지 않음
- MathOverflowError / CastOverflowError: 오버플로우, 0 나누기, 정수 폭 위반
- PoolLockedError: 재진입 또는 활성화되지 않은 풀
"""


class ProAMMError(Exception):
    """ProAMM 오류 기본 클래스"""
    pass


class PoolValidationError(ProAMMError, ValueError):
    """입력 검증 오류 (상태 변경 전에 거부)"""
    pass


class AlreadyInitializedError(PoolValidationError):
    """initialize / unlock_pool 을 두 번 호출"""

    def __init__(self, message: str = "already inited"):
        super().__init__(message)


class InvalidTickRangeError(PoolValidationError):
    """tick_lower >= tick_upper 이거나 전역 틱 범위를 벗어난 포지션"""
    pass


class TickSpacingError(PoolValidationError):
    """틱이 tick spacing 의 배수가 아님"""

    def __init__(self, message: str = "tick not in spacing"):
        super().__init__(message)


class ZeroQuantityError(PoolValidationError):
    """수량이 0 인 mint / burn / swap"""

    def __init__(self, message: str = "0 qty"):
        super().__init__(message)


class PriceLimitError(PoolValidationError):
    """가격 제한이 현재 가격의 반대편이거나 전역 범위를 벗어남"""

    def __init__(self, message: str = "bad limitSqrtP"):
        super().__init__(message)


class TickOutOfRangeError(PoolValidationError):
    """틱이 [MIN_TICK, MAX_TICK] 를 벗어남"""
    pass


class PriceOutOfRangeError(PoolValidationError):
    """sqrt price 가 [MIN_SQRT_RATIO, MAX_SQRT_RATIO) 를 벗어남"""
    pass


class CapacityError(ProAMMError):
    """유동성 용량 오류"""
    pass


class TickLiquidityCapError(CapacityError):
    """틱의 liquidity_gross 가 max_liquidity_per_tick 초과"""

    def __init__(self, message: str = "> max liquidity"):
        super().__init__(message)


class InsufficientLiquidityError(CapacityError):
    """포지션이 보유한 것보다 많은 유동성 burn"""

    def __init__(self, message: str = "insufficient liquidity"):
        super().__init__(message)


class LiquidityUnderflowError(CapacityError):
    """부호 있는 유동성 변화량 적용 결과가 음수"""
    pass


class SettlementError(ProAMMError):
    """콜백 이후 풀 잔고가 요구 수량만큼 증가하지 않음"""
    pass


class PoolLockedError(ProAMMError):
    """다른 작업이 진행 중이거나 아직 unlock 되지 않은 풀"""

    def __init__(self, message: str = "locked"):
        super().__init__(message)


class MathOverflowError(ProAMMError, ArithmeticError):
    """mul-div 결과가 uint256 을 넘거나 분모가 0"""
    pass


class CastOverflowError(ProAMMError, ArithmeticError):
    """정수 폭 / 부호 변환 범위 위반"""
    pass
