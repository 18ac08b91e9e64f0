"""
AAC 沟通板的映射/导航引擎。

定位：
- domain：类别（AacCategory）、顶层注册表（AacMappings，含导航游标）、文本格式的解析与写出
- infra：映射文件的读取（失败回退到空首页）与原子写入
- api：供前端/驱动程序使用的 HTTP 接口（FastAPI）

渲染符号、播放语音属于外部协作方，不在本包内。
"""

__version__ = "0.1.0"
