"""HTML contract templates.

Placeholders use :class:`string.Template` syntax.  Every value substituted
here has already been HTML-escaped by :mod:`influencer_crm.contracts.render`;
the ``*_html`` fragments are built there from escaped values.
"""

from __future__ import annotations

from string import Template

BRAND_NAME = "NAMA"
BRAND_LEGAL_NAME = "Namastetics Inc."
BRAND_SHORT_NAME = "Nama"
BRAND_HANDLE = "@nama"
BRAND_SIGNATORY = "Shane Petersen"
BRAND_SIGNATORY_TITLE = "Founder"
BRAND_EMAIL = "shane@namaclo.com"
BRAND_SIGNATURE_IMAGE = "/signature-shane.png"

_BASE_STYLE = """
    body {
      font-family: Arial, sans-serif;
      font-size: 11pt;
      line-height: 1.5;
      color: #000;
      max-width: 8.5in;
      margin: 0 auto;
      padding: 0.75in;
    }
    .party { margin-bottom: 0.2in; }
    .party-name { font-weight: bold; }
    ul { margin: 0.1in 0; padding-left: 0.4in; }
    li { margin-bottom: 0.05in; }
    .signature-section { margin-top: 0.5in; page-break-inside: avoid; }
    .signature-block { margin-top: 0.3in; }
    .signature-line { border-bottom: 1px solid #000; width: 3in; margin: 0.3in 0 0.05in 0; }
"""

PAID_COLLAB_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <style>"""
    + _BASE_STYLE
    + """
    h1 { text-align: center; font-size: 18pt; font-weight: bold; margin-bottom: 0.5in; }
    .date-line {
      text-align: center;
      font-weight: bold;
      margin-bottom: 0.3in;
      padding-top: 0.2in;
      border-top: 1px solid #000;
    }
    h2 {
      font-size: 11pt;
      font-weight: bold;
      text-decoration: underline;
      margin-top: 0.3in;
      margin-bottom: 0.15in;
    }
    .signature-image { height: 100px; margin: 0.1in 0; }
  </style>
</head>
<body>
  <h1>TALENT COLLABORATION AGREEMENT</h1>

  <div class="date-line">Effective Date: $effective_date</div>

  <p>This Agreement is entered into by and between:</p>

  <div class="party">
    <p><span class="party-name">$brand_name</span> ("Brand")<br>
    Contact: $brand_signatory<br>
    Email: $brand_email</p>
  </div>

  <p>and</p>

  <div class="party">
    <p><span class="party-name">$talent_name</span> ("Talent")$representative_html</p>
  </div>

  <h2>1. SCOPE OF WORK</h2>
  <p>The Talent agrees to create and publish the following content ("Deliverables"):</p>
  <ul>
    <li>$deliverables</li>
  </ul>

  <h2>2. COMPENSATION</h2>
  <p><strong>Total Fee:</strong> $total_fee$fee_additions_html</p>
  <p><strong>Total Amount Due:</strong> $total_amount_due</p>
  <p>Payment Terms:</p>
  <ul>
    <li>$payment_1_percent ($payment_1_amount) $payment_1_condition</li>
    <li>$payment_2_percent ($payment_2_amount) $payment_2_condition</li>
  </ul>

  <h2>3. TIMELINE</h2>
  <ul>
    <li>Product shipment: Within 2-3 days of execution</li>
    <li>Outfit selection: Before shipment</li>
    <li>Content creation &amp; approval: Per mutual agreement</li>
    <li>Publication: Within 7 days of receiving the product</li>
  </ul>

  <h2>4. CONTENT REQUIREMENTS</h2>
  <ul>
    <li>Must include $brand_handle and any required hashtags</li>
    <li>Must include links where requested/relevant</li>
    <li>Talent maintains creative control but must follow brand guidelines</li>
    <li>Brand may request reasonable revisions to ensure brand alignment</li>
  </ul>

  <h2>5. USAGE RIGHTS</h2>
  <p>The following rights are included in the compensation:</p>
  <ul>
    <li>Organic digital &amp; social media usage: $usage_rights_duration</li>
    <li>Instagram collaborative post rights (included at no additional fee)</li>
  </ul>

  <h2>6. CONTENT APPROVAL</h2>
  <ul>
    <li>Brand may review content prior to posting</li>
    <li>Brand will provide feedback within 24 hours of receiving content for review</li>
    <li>Talent will make reasonable efforts to accommodate revision requests</li>
    <li>Final approval required before posting</li>
  </ul>

  <h2>7. PRODUCT</h2>
  <ul>
    <li>Brand provides the product from the chosen collection as agreed upon</li>
    <li>Talent selects the product before shipment</li>
    <li>Product becomes property of Talent after deliverables are completed</li>
  </ul>

  <h2>8. REPRESENTATIONS &amp; WARRANTIES</h2>
  <p>Both parties represent and warrant that:</p>
  <ul>
    <li>They have the full right and authority to enter into this Agreement</li>
    <li>The content will not infringe third-party rights</li>
    <li>All content will be original work created specifically for this collaboration</li>
    <li>Talent has the right to grant all rights specified herein</li>
  </ul>

  <h2>9. TERMINATION</h2>
  <p>Either party may terminate if the other materially breaches. The brand may seek a
  remedy in the event of a Talent breach after payment.</p>

  <h2>10. CONFIDENTIALITY</h2>
  <p>Both parties agree to keep confidential all proprietary information, including rates,
  terms, and unreleased product details.</p>

  <h2>11. INDEMNIFICATION</h2>
  <p>Each party agrees to indemnify and hold the other harmless from claims arising from
  breach or negligence.</p>

  <h2>12. ENTIRE AGREEMENT</h2>
  <p>This Agreement constitutes the entire agreement between the parties and supersedes all
  prior negotiations, representations, or agreements. Any modifications must be made in
  writing and signed by both parties.</p>

  <div class="signature-section">
    <h2>ACCEPTANCE</h2>

    <div class="signature-block">
      <p>For $brand_name:</p>
      <img src="$signature_image" alt="$brand_signatory Signature" class="signature-image" />
      <p class="signature-name">$brand_signatory<br>Date: $effective_date</p>
    </div>

    <div class="signature-block">
      <p>For $talent_name:</p>
      <div class="signature-line"></div>
      <p class="signature-name">$talent_signatory_name<br>Date: ___________________</p>
    </div>
  </div>
</body>
</html>
"""
)

WHITELISTING_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <style>"""
    + _BASE_STYLE
    + """
    .logo {
      text-align: center;
      font-family: 'Times New Roman', serif;
      font-size: 36pt;
      letter-spacing: 0.2em;
      margin-bottom: 0.2in;
    }
    h1 { text-align: center; font-size: 14pt; font-weight: bold; margin-bottom: 0.5in; }
    .intro { margin-bottom: 0.3in; padding-top: 0.2in; border-top: 1px solid #000; }
    h2 {
      font-size: 14pt;
      font-weight: normal;
      margin-top: 0.4in;
      margin-bottom: 0.15in;
      padding-top: 0.15in;
      border-top: 1px solid #ccc;
    }
    .signature-image { height: 50px; margin: 0.1in 0; }
  </style>
</head>
<body>
  <div class="logo">$brand_name</div>
  <h1>Whitelisting Collaboration Agreement</h1>

  <div class="intro">
    <p><strong>This Agreement</strong> ("Agreement") is made and entered into on
    <strong>$effective_date</strong>, by and between:</p>

    <div class="party">
      <p><span class="party-name">$brand_legal_name</span> ("$brand_short_name")<br>
      Contact: $brand_signatory, $brand_signatory_title<br>
      Email: $brand_email</p>
    </div>

    <p>and</p>

    <div class="party">
      <p><span class="party-name">$talent_name</span> ("Talent")<br>
      Email: $talent_email</p>
    </div>

    <p>Collectively referred to as the "Parties."</p>
  </div>

  <h2>1. Overview</h2>
  <p>Talent grants $brand_short_name permission to use existing social media content featuring
  $brand_short_name products ("Approved Content") for paid advertising purposes ("Whitelisting")
  on Meta platforms (Instagram and Facebook).</p>

  <h2>2. Usage Rights</h2>
  <ul>
    <li>$brand_short_name is granted non-exclusive rights to run paid advertisements using
    Approved Content via Talent's handle and/or $brand_short_name's handle.</li>
    <li>Usage is limited to Meta platforms (Instagram and Facebook).</li>
    <li>$brand_short_name will share ad creative with Talent for approval prior to activation.
    Talent has 24 hours to respond with approval or requested changes. If no response is
    received within 24 hours, the ad will be considered approved.</li>
  </ul>

  <h2>3. Compensation &amp; Payment Terms</h2>
  <p>In exchange for the rights granted, Talent will receive:</p>
  <ul>
    <li><strong>$compensation</strong></li>
  </ul>

  <h2>4. Usage Period &amp; Renewal</h2>
  <ul>
    <li>This Agreement grants ongoing usage rights.</li>
    <li>Either party may terminate with 30 days written notice. Upon termination,
    $brand_short_name will remove all active ads using Talent's content within 7 business
    days.</li>
  </ul>

  <h2>5. Ownership</h2>
  <p>All content remains the sole property of Talent. $brand_short_name is granted only the
  limited usage rights described above and makes no claim to ownership or copyright of the
  Approved Content.</p>

  <h2>6. Termination</h2>
  <p>Either party may terminate this Agreement with 30 days written notice via email. Upon
  termination, all whitelisting rights end and $brand_short_name will deactivate any running
  ads featuring Talent's content.</p>

  <div class="signature-section">
    <p><strong>IN WITNESS WHEREOF</strong>, the Parties have executed this Agreement as of the
    date written below.</p>

    <div class="signature-block">
      <p><strong>For $brand_short_name:</strong></p>
      <p>Name: $brand_signatory<br>
      Title: $brand_signatory_title</p>
      <p>Signature: <img src="$signature_image" alt="$brand_signatory Signature"
      class="signature-image" /></p>
      <p>Date: $effective_date</p>
    </div>

    <div class="signature-block">
      <p><strong>For Talent: $talent_name</strong></p>
      <p>Name: $talent_name</p>
      <p>Signature: <span class="signature-line" style="display: inline-block;"></span></p>
      <p>Date: ___________________________</p>
    </div>
  </div>
</body>
</html>
"""
)
