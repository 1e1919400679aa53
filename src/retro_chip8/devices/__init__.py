"""
周辺デバイス（フレームバッファ、ディスプレイ、キーパッド）パッケージ。
"""
