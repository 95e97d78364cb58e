# route_vis.py
import numpy as np
from pathlib import Path
import cv2


def _minmax(v):
    return float(np.min(v)), float(np.max(v))


def save_birdeye_markers_png(out_png: Path,
                             markers,
                             *,
                             corners=None,
                             px: int = 1024,
                             arrow_len_m: float = 0.18,
                             arrow_width_m: float = 0.12,
                             every: int = 1):
    """
    Top-down (X,Z) view of a route.
    - -Z (the default forward) points upward on the image, +X to the right.
    - Route polyline through `corners` (blue), arrow wedges for directional
      markers (dark), destination as a filled red disc, start as a green disc.
    Returns the path written, or None if there is nothing to draw.
    """
    if markers is None or len(markers) == 0:
        return None

    P = np.array([m.position.as_list() for m in markers], np.float32)  # (N,3)
    C = (np.array([c.as_list() for c in corners], np.float32)
         if corners is not None and len(corners) else np.zeros((0, 3), np.float32))
    xs = [P[:, 0]]; zs = [P[:, 2]]
    if C.size: xs.append(C[:, 0]); zs.append(C[:, 2])

    xmin, xmax = _minmax(np.concatenate(xs))
    zmin, zmax = _minmax(np.concatenate(zs))
    span = max(xmax - xmin, zmax - zmin, 1.0)
    pad = 0.08 * span
    xmin -= pad; xmax += pad; zmin -= pad; zmax += pad

    W = int(px)
    H = max(64, int(round(px * (zmax - zmin) / max(1e-6, (xmax - xmin)))))
    img = np.ones((H, W, 3), np.uint8) * 255

    def to_px(x, z):
        u = (x - xmin) / max(1e-6, (xmax - xmin))
        v = (z - zmin) / max(1e-6, (zmax - zmin))
        return int(round(u * (W - 1))), int(round(v * (H - 1)))  # -Z up

    # route polyline (blue-ish)
    for i in range(1, C.shape[0]):
        cv2.line(img, to_px(C[i-1, 0], C[i-1, 2]), to_px(C[i, 0], C[i, 2]), (200, 80, 0), 2, cv2.LINE_AA)
    if C.shape[0]:
        cv2.circle(img, to_px(C[0, 0], C[0, 2]), 7, (40, 180, 40), -1, cv2.LINE_AA)

    # arrow wedges for directional markers
    step = max(1, int(every))
    for k in range(0, len(markers), step):
        m = markers[k]
        if m.is_destination:
            continue
        d = np.array([m.heading.x, m.heading.z], np.float32)
        nrm = float(np.linalg.norm(d))
        if nrm < 1e-6:
            continue
        d = d / nrm
        p0 = np.array([m.position.x, m.position.z], np.float32)
        tail = p0 - d * (0.5 * arrow_len_m)
        tip = p0 + d * (0.5 * arrow_len_m)
        left = tail + np.array([-d[1], d[0]], np.float32) * (0.5 * arrow_width_m)
        right = tail + np.array([d[1], -d[0]], np.float32) * (0.5 * arrow_width_m)
        pts = np.array([to_px(*tip), to_px(*left), to_px(*p0), to_px(*right)], np.int32)
        cv2.fillPoly(img, [pts], (30, 30, 30), cv2.LINE_AA)

    # destination (red)
    dst = markers[-1]
    cv2.circle(img, to_px(dst.position.x, dst.position.z), 9, (0, 0, 255), -1, cv2.LINE_AA)

    # compass
    base = np.array([xmin + 0.08*(xmax-xmin), zmax - 0.08*(zmax-zmin)], np.float32)
    u0 = to_px(*base); ux = to_px(base[0]+0.5, base[1]); uz = to_px(base[0], base[1]-0.5)
    cv2.arrowedLine(img, u0, ux, (0,0,0), 2, tipLength=0.25); cv2.putText(img, "+X", (ux[0]+4, ux[1]), 0, 0.45, (0,0,0), 1, cv2.LINE_AA)
    cv2.arrowedLine(img, u0, uz, (0,0,0), 2, tipLength=0.25); cv2.putText(img, "-Z", (uz[0]+4, uz[1]), 0, 0.45, (0,0,0), 1, cv2.LINE_AA)

    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(out_png), img)
    return out_png
