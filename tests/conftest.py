from datetime import date
from io import BytesIO

import pytest
from reportlab.pdfgen import canvas

from pppk_contracts.schemas import ContractTemplate, ContractType, Employee, TemplateSection
from pppk_contracts.services.text_layout import F4_SIZE


@pytest.fixture
def employee():
    return Employee(
        ni_pppk="199001152024211001",
        contract_number="800/001/PPPK/2024",
        nik="3201011501900001",
        participant_id="24400110810000001",
        full_name="Andi Pratama",
        birth_place="Bogor",
        birth_date=date(1990, 1, 15),
        gender="LAKI-LAKI",
        address="Jl. Merdeka No. 10, Cibinong",
        position="Guru Ahli Pertama",
        unit_name="SD Negeri 1 Cibinong",
        education="S1 PGSD",
        grade_class="IX",
        salary_numeric=3203600,
        salary_words="tiga juta dua ratus tiga ribu enam ratus rupiah",
        graduation_year=2012,
        contract_type=ContractType.PENUH_WAKTU,
    )


@pytest.fixture
def template():
    return ContractTemplate(
        id="tpl-test",
        name="Template Uji",
        contract_type=ContractType.PENUH_WAKTU,
        header_title="PERJANJIAN KERJA",
        opening_text="Pada hari ini, {{HARI_INI_LONG}}, yang bertanda tangan di bawah ini:",
        sections=[
            TemplateSection(
                title="PASAL 1",
                subtitle="MASA PERJANJIAN KERJA",
                content=(
                    "Masa Perjanjian Kerja adalah selama {{MASA_KONTRAK_TAHUN}} "
                    "({{MASA_KONTRAK_TERBILANG}}) tahun, terhitung mulai tanggal "
                    "{{TANGGAL_MULAI_KONTRAK}} sampai dengan tanggal {{TANGGAL_SELESAI_KONTRAK}}."
                ),
            ),
            TemplateSection(
                title="PASAL 2",
                subtitle="GAJI",
                content="{{NAMA_LENGKAP}} berhak atas gaji sebesar Rp. {{GAJI_ANGKA}},- ({{GAJI_TERBILANG}}) per bulan.",
            ),
        ],
        closing_text="Demikian perjanjian kerja ini dibuat untuk dipergunakan sebagaimana mestinya.",
    )


@pytest.fixture
def make_pdf():
    """Builds a small PDF in memory: make_pdf(pages=1, size=F4_SIZE, text=...)."""

    def _make(pages=1, size=F4_SIZE, text="TTD BASAH"):
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=size)
        for i in range(pages):
            c.drawString(72, 720, f"{text} {i + 1}")
            c.showPage()
        c.save()
        return buf.getvalue()

    return _make
