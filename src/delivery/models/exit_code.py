"""ExitCode — 終了コードの定義。"""

from enum import IntEnum


class ExitCode(IntEnum):
    """プロセス終了コード。

    2 は Click の使用法エラーと衝突するため使用しない。
    INPUT_ERROR は設定不足など利用者が解決できるエラー、
    EXECUTION_ERROR は設定ファイル書き込み失敗などの実行時エラー。
    """

    SUCCESS = 0
    EXECUTION_ERROR = 3
    INPUT_ERROR = 4
