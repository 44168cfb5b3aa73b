"""
FormLayout - Motor de diseño de formularios sobre esquemas de datasets.

Permite armar la jerarquía de tablas de un formulario, agrupar sus campos
en bloques horizontales, reordenarlos mediante eventos de arrastre y
exportar/importar el resultado como documento JSON versionado.
"""

__version__ = "0.3.0"
