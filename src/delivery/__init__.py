def main() -> None:
    """パッケージエントリポイント。cli.main() に委譲する。

    pyproject.toml の [project.scripts] は delivery.cli:main を直接参照するため、
    この関数はスクリプトエントリポイントとしては呼ばれない。
    プログラムから delivery.main() として呼び出す場合の互換用。
    """
    from delivery.cli import main as cli_main

    cli_main()
