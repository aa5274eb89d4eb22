"""Apps - 命令行应用"""
