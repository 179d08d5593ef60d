## affine transformation operations for 3D points and vectors in geoquery
## Copyright (c) 2024 geoquery contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import cos, pi, sin

import geoquery.geom as geom
from geoquery.config import resolve_epsilon
from geoquery.errors import InvalidInput, error_singular

## an affine map is a 3x4 matrix [L | t]: a 3x3 linear part L and a
## translation column t.  It is stored as the four rows of the
## equivalent homogeneous 4x4 matrix, the last row always being
## [0,0,0,1].  Points transform as p' = L p + t, vectors as v' = L v.
## Maps are immutable; every operation returns a new map.

_IDENTITY = ((1.0, 0.0, 0.0, 0.0),
             (0.0, 1.0, 0.0, 0.0),
             (0.0, 0.0, 1.0, 0.0),
             (0.0, 0.0, 0.0, 1.0))


class AffineMap:
    """3x4 affine transformation of 3D points and vectors"""

    __slots__ = ('m',)

    def __init__(self, a=None):
        if a is None:
            rows = _IDENTITY
        elif isinstance(a, AffineMap):
            rows = a.m
        elif isinstance(a, (tuple, list)):
            if len(a) in (3, 4) and all(isinstance(r, (tuple, list)) for r in a):
                rows = [list(r) for r in a]
                if any(len(r) != 4 for r in rows):
                    raise InvalidInput('affine map rows must have four elements')
            elif len(a) in (12, 16):
                rows = [list(a[i*4:i*4+4]) for i in range(len(a)//4)]
            else:
                raise InvalidInput('bad thing used in attempt to initialize affine map: {}'.format(a))
            if len(rows) == 3:
                rows.append([0.0, 0.0, 0.0, 1.0])
            for r in rows:
                for x in r:
                    if not geom.isgoodnum(x):
                        raise InvalidInput('bad element in affine map initialization: {}'.format(x))
            if [float(x) for x in rows[3]] != [0.0, 0.0, 0.0, 1.0]:
                raise InvalidInput('projective matrices are not affine maps: last row {}'.format(rows[3]))
        else:
            raise InvalidInput('bad thing used in attempt to initialize affine map: {}'.format(a))
        self.m = tuple(tuple(float(x) for x in r) for r in rows)

    def __repr__(self):
        return "AffineMap({},{},{})".format(list(self.m[0]), list(self.m[1]),
                                            list(self.m[2]))

    def __eq__(self, other):
        if not isinstance(other, AffineMap):
            return NotImplemented
        return self.m == other.m

    def __hash__(self):
        return hash(self.m)

    #return value indexed by i,j
    def get(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise IndexError('bad index passed to get: {},{}'.format(i, j))
        return self.m[i][j]

    def getrow(self, i):
        if i < 0 or i > 3:
            raise IndexError('bad row passed to getrow: {}'.format(i))
        return list(self.m[i])

    def getcol(self, j):
        if j < 0 or j > 3:
            raise IndexError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j], self.m[1][j], self.m[2][j], self.m[3][j]]

    def linear(self):
        """the 3x3 linear part as a list of rows"""
        return [list(self.m[i][:3]) for i in range(3)]

    def translation(self):
        return geom.Vector3D(self.m[0][3], self.m[1][3], self.m[2][3])

    def determinant(self):
        """determinant of the linear part"""
        (a, b, c), (d, e, f), (g, h, i) = self.linear()
        return a*(e*i - f*h) - b*(d*i - f*g) + c*(d*h - e*g)

    def isclose(self, other, tol=None):
        eps = resolve_epsilon(tol)
        return all(abs(self.m[i][j] - other.m[i][j]) <= eps
                   for i in range(3) for j in range(4))

    # composition.  If x is a map, compute MX, the map that applies X
    # first and then M.  If x is a point or a vector, transform it.

    def mul(self, x):
        if isinstance(x, AffineMap):
            rows = []
            for i in range(3):
                row = self.m[i]
                rows.append([sum(row[k] * x.m[k][j] for k in range(4))
                             for j in range(4)])
            return AffineMap(rows)
        elif isinstance(x, geom.Point3D):
            return self.transform_point(x)
        elif isinstance(x, geom.Vector3D):
            return self.transform_vector(x)
        raise TypeError('bad thing passed to mul(): {}'.format(x))

    __matmul__ = mul

    def transform_point(self, p):
        m = self.m
        return geom.Point3D(m[0][0]*p[0] + m[0][1]*p[1] + m[0][2]*p[2] + m[0][3],
                            m[1][0]*p[0] + m[1][1]*p[1] + m[1][2]*p[2] + m[1][3],
                            m[2][0]*p[0] + m[2][1]*p[1] + m[2][2]*p[2] + m[2][3])

    def transform_vector(self, v):
        m = self.m
        return geom.Vector3D(m[0][0]*v[0] + m[0][1]*v[1] + m[0][2]*v[2],
                             m[1][0]*v[0] + m[1][1]*v[1] + m[1][2]*v[2],
                             m[2][0]*v[0] + m[2][1]*v[1] + m[2][2]*v[2])

    # numeric inverse through the adjugate of the linear part:
    # [L | t]^-1 = [L^-1 | -L^-1 t]

    def inverse(self, tol=None):
        eps = resolve_epsilon(tol)
        det = self.determinant()
        if abs(det) <= eps:
            raise error_singular(det, eps)
        (a, b, c), (d, e, f), (g, h, i) = self.linear()
        inv = [[(e*i - f*h)/det, (c*h - b*i)/det, (b*f - c*e)/det],
               [(f*g - d*i)/det, (a*i - c*g)/det, (c*d - a*f)/det],
               [(d*h - e*g)/det, (b*g - a*h)/det, (a*e - b*d)/det]]
        t = self.translation()
        rows = []
        for r in inv:
            rows.append(r + [-(r[0]*t[0] + r[1]*t[1] + r[2]*t[2])])
        return AffineMap(rows)


IDENTITY = AffineMap()


def from_axes(xaxis, yaxis, zaxis, origin=geom.ORIGIN):
    """map whose linear columns are the given axes and whose translation is ``origin``"""
    return AffineMap([[xaxis[0], yaxis[0], zaxis[0], origin[0]],
                      [xaxis[1], yaxis[1], zaxis[1], origin[1]],
                      [xaxis[2], yaxis[2], zaxis[2], origin[2]]])


# return the arbitrary axis rotation map, angle in degrees
def Rotation(axis, angle, inverse=False):
    m = geom.mag(axis)
    if m < resolve_epsilon():
        raise InvalidInput('zero-length rotation axis not allowed')
    ux, uy, uz = axis[0]/m, axis[1]/m, axis[2]/m

    if inverse:
        angle *= -1.0
    rad = (angle % 360.0)*2.0*pi/360.0

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin - uz*sang, ux*uz*cmin + uy*sang, 0],
         [uy*ux*cmin + uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang, 0],
         [uz*ux*cmin - uy*sang, uz*uy*cmin + ux*sang, cang + uz*uz*cmin, 0]]

    return AffineMap(R)


def Translation(delta, inverse=False):
    if inverse:
        delta = geom.scale3(delta, -1.0)
    T = [[1, 0, 0, delta[0]],
         [0, 1, 0, delta[1]],
         [0, 0, 1, delta[2]]]
    return AffineMap(T)


def Scale(x, y=None, z=None, inverse=False):
    if geom.isgoodnum(x):
        sx = x
        if geom.isgoodnum(y) and geom.isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    elif isinstance(x, (geom.Vector3D, geom.Point3D, tuple, list)):
        sx, sy, sz = x[0], x[1], x[2]
    else:
        raise InvalidInput('bad scaling values passed to Scale')

    if inverse:
        sx = 1.0/sx
        sy = 1.0/sy
        sz = 1.0/sz

    S = [[sx, 0, 0, 0],
         [0, sy, 0, 0],
         [0, 0, sz, 0]]
    return AffineMap(S)
