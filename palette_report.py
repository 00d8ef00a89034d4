"""추출 결과 출력: 터미널 트루컬러 스와치와 팔레트 이미지"""

from PIL import Image, ImageDraw
from rich.console import Console
from rich.text import Text

from palette_errors import EmptyInputError, InvalidConfiguration


def hex_code(color):
    r, g, b = color
    return f"#{r:02X}{g:02X}{b:02X}"


def _swatch(color):
    r, g, b = color
    return Text("  ", style=f"on rgb({r},{g},{b})")


def print_color_palette(color_ranking, top=10, console=None):
    """빈도 상위 색상 목록 출력"""
    console = console or Console()
    console.print(f"Top {top} colors in the video:")
    for idx, (color, count) in enumerate(color_ranking[:top]):
        line = Text(f"{idx + 1}. {hex_code(color)} ")
        line.append_text(_swatch(color))
        line.append(f" (count: {count})")
        console.print(line)


def print_color_clusters(clusters, console=None):
    """클러스터 중심색과 각 클러스터가 차지하는 픽셀 비율 출력"""
    console = console or Console()
    total = sum(c.pixel_count for c in clusters)
    console.print("Color clusters:")
    for idx, cluster in enumerate(clusters):
        share = (cluster.pixel_count / total * 100) if total else 0.0
        line = Text(f"{idx + 1}. Centroid: {hex_code(cluster.centroid)} ")
        line.append_text(_swatch(cluster.centroid))
        line.append(f" {share:.1f}% ({len(cluster.assignments)} colors)")
        console.print(line)


def save_palette_swatch(clusters, output_path, width=800, height=100):
    """클러스터별 픽셀 비율에 비례한 가로 띠 이미지를 PNG로 저장"""
    filled = [c for c in clusters if c.pixel_count > 0]
    total = sum(c.pixel_count for c in filled)
    if total == 0:
        raise EmptyInputError("스와치로 그릴 클러스터가 없습니다")

    out_img = Image.new('RGB', (width, height), color=(0, 0, 0))
    draw = ImageDraw.Draw(out_img)

    x_pos = 0
    for i, cluster in enumerate(filled):
        # 마지막 띠가 남은 폭을 모두 차지해 반올림 오차로 생기는 틈을 없앰
        band = width - x_pos if i == len(filled) - 1 else round(width * cluster.pixel_count / total)
        if band <= 0: continue
        draw.rectangle([x_pos, 0, x_pos + band - 1, height - 1], fill=tuple(cluster.centroid))
        x_pos += band

    try:
        out_img.save(output_path)
    except (OSError, ValueError) as e:
        raise InvalidConfiguration(f"팔레트 이미지를 저장할 수 없습니다: {output_path} ({e})",
                                   context={"path": str(output_path)}) from e
    return output_path
