"""版本信息"""

__version__ = "0.1.0"
__author__ = "ycms contributors"
__description__ = "CMS 分类树、导航菜单与多语言翻译关联引擎"
