"""Content MathML reader and writer.

Operators are written as ``<apply>`` elements: the operator element first,
then (for sums) the ``<bvar>``, then the operands, then optional
``<lowlimit>``/``<uplimit>`` wrappers around the bounds. Both namespaced
and bare element names are accepted on input.
"""

import math
from lxml import etree
from typing import List

from ..core.node import Expression, Constant, Variable, Real, Imaginary, Impulse, format_number
from ..core.unary import UnaryExpression, Tan, ArcTan, Log, Floor
from ..core.binary import BinaryExpression, Add, Subtract, Multiply, Divide, Modulo, Exponent
from ..core.bounded import BoundedUnaryExpression, Fourier, Laplace, Sum
from ..core.operators import ExpressionType
from ...errors import MalformedInput

MML_NS = 'http://www.w3.org/1998/Math/MathML'
MML = '{' + MML_NS + '}'

OPERATOR_TAGS = {
  ExpressionType.ADD: 'plus',
  ExpressionType.SUBTRACT: 'minus',
  ExpressionType.MULTIPLY: 'times',
  ExpressionType.DIVIDE: 'divide',
  ExpressionType.MODULO: 'rem',
  ExpressionType.EXPONENT: 'power',
  ExpressionType.TAN: 'tan',
  ExpressionType.ARCTAN: 'arctan',
  ExpressionType.LOG: 'ln',
  ExpressionType.FLOOR: 'floor',
  ExpressionType.FOURIER: 'fourier',
  ExpressionType.LAPLACE: 'laplace',
  ExpressionType.SUM: 'sum',
}

OPERATOR_CLASSES = {
  'plus': Add,
  'minus': Subtract,
  'times': Multiply,
  'divide': Divide,
  'rem': Modulo,
  'power': Exponent,
  'tan': Tan,
  'arctan': ArcTan,
  'ln': Log,
  'floor': Floor,
  'fourier': Fourier,
  'laplace': Laplace,
  'sum': Sum,
}


def _sub(parent, tag: str, text: str = None):
  element = etree.SubElement(parent, MML + tag)
  if text is not None:
    element.text = text
  return element


def _serialize_leaf(expression: Expression, parent):
  node_type = expression.node_type
  if node_type == ExpressionType.VARIABLE:
    _sub(parent, 'ci', expression.name)
  elif node_type == ExpressionType.REAL:
    _sub(parent, 'cn', repr(expression.value))
  elif node_type == ExpressionType.CONSTANT:
    if expression.value == math.pi:
      _sub(parent, 'pi')
    elif expression.value == math.e:
      _sub(parent, 'exponentiale')
    else:
      cn = _sub(parent, 'cn', repr(expression.value))
      cn.set('type', 'constant')
      cn.set('name', expression.name)
  elif node_type == ExpressionType.IMAGINARY:
    _sub(parent, 'imaginaryi')
  elif node_type == ExpressionType.IMPULSE:
    _sub(parent, 'csymbol', 'impulse')
  else:
    raise MalformedInput(f"cannot serialize {type(expression).__name__}")


def serialize_to(expression: Expression, parent) -> None:
  """Append the MathML form of ``expression`` to the lxml element ``parent``."""
  tag = OPERATOR_TAGS.get(expression.node_type)
  if tag is None:
    _serialize_leaf(expression, parent)
    return

  apply = _sub(parent, 'apply')
  _sub(apply, tag)

  if isinstance(expression, BinaryExpression):
    serialize_to(expression.most_sig_op, apply)
    serialize_to(expression.least_sig_op, apply)
  elif isinstance(expression, UnaryExpression):
    serialize_to(expression.operand, apply)
  elif isinstance(expression, BoundedUnaryExpression):
    if isinstance(expression, Sum):
      _sub(_sub(apply, 'bvar'), 'ci', expression.variable.name)
    serialize_to(expression.operand, apply)
    if expression.has_lower_bound():
      serialize_to(expression.lower_bound, _sub(apply, 'lowlimit'))
    if expression.has_upper_bound():
      serialize_to(expression.upper_bound, _sub(apply, 'uplimit'))


def to_mathml(expression: Expression, pretty_print: bool = False) -> str:
  root = etree.Element(MML + 'math', nsmap={None: MML_NS})
  serialize_to(expression, root)
  return etree.tostring(root, encoding='unicode', pretty_print=pretty_print)


def _local(element) -> str:
  return etree.QName(element).localname


def _children(element) -> List:
  # skips comments and processing instructions
  return [child for child in element if isinstance(child.tag, str)]


def _text(element) -> str:
  text = (element.text or '').strip()
  if not text:
    raise MalformedInput(f"<{_local(element)}> is empty")
  return text


def _number(element) -> float:
  text = _text(element)
  try:
    return float(text)
  except ValueError as e:
    raise MalformedInput(f"<cn> holds a non-number: {text!r}") from e


def _only_child(element) -> Expression:
  children = _children(element)
  if len(children) != 1:
    raise MalformedInput(f"<{_local(element)}> must wrap exactly one expression")
  return deserialize_from(children[0])


def _deserialize_apply(element) -> Expression:
  children = _children(element)
  if not children:
    raise MalformedInput("empty <apply>")

  head, rest = children[0], children[1:]
  cls = OPERATOR_CLASSES.get(_local(head))
  if cls is None:
    raise MalformedInput(f"unknown operator <{_local(head)}>")

  variable = None
  if rest and _local(rest[0]) == 'bvar':
    if cls is not Sum:
      raise MalformedInput(f"<bvar> is only valid in a sum, not <{_local(head)}>")
    bvar = _only_child(rest[0])
    if bvar.node_type != ExpressionType.VARIABLE:
      raise MalformedInput("<bvar> must hold a <ci>")
    variable = bvar
    rest = rest[1:]

  operands = []
  lower = upper = None
  for child in rest:
    name = _local(child)
    if name == 'lowlimit':
      lower = _only_child(child)
    elif name == 'uplimit':
      upper = _only_child(child)
    else:
      operands.append(deserialize_from(child))

  if issubclass(cls, BinaryExpression):
    if len(operands) != 2 or lower is not None or upper is not None:
      raise MalformedInput(f"<{_local(head)}> takes exactly two operands")
    return cls(operands[0], operands[1])

  if len(operands) != 1:
    raise MalformedInput(f"<{_local(head)}> takes exactly one operand")
  if issubclass(cls, UnaryExpression):
    if lower is not None or upper is not None:
      raise MalformedInput(f"<{_local(head)}> has no bounds")
    return cls(operands[0])
  if cls is Sum:
    return Sum(operands[0], lower, upper, variable)
  return cls(operands[0], lower, upper)


def deserialize_from(element) -> Expression:
  """Build an expression from one lxml element."""
  name = _local(element)
  if name == 'ci':
    return Variable(_text(element))
  if name == 'cn':
    if element.get('type') == 'constant':
      value = _number(element)
      return Constant(value, element.get('name') or format_number(value))
    return Real(_number(element))
  if name == 'pi':
    return Constant.pi()
  if name == 'exponentiale':
    return Constant.e()
  if name == 'imaginaryi':
    return Imaginary()
  if name == 'csymbol':
    if _text(element) != 'impulse':
      raise MalformedInput(f"unknown symbol {_text(element)!r}")
    return Impulse()
  if name == 'apply':
    return _deserialize_apply(element)
  raise MalformedInput(f"unexpected element <{name}>")


def from_mathml(text: str) -> Expression:
  try:
    root = etree.fromstring(text.encode('utf-8'))
  except etree.XMLSyntaxError as e:
    raise MalformedInput(f"invalid XML: {e}") from e

  if _local(root) == 'math':
    return _only_child(root)
  return deserialize_from(root)
